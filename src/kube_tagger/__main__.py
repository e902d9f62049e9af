"""Allow running the operator with ``python -m kube_tagger``."""

from .cli import main

if __name__ == "__main__":
    main()
