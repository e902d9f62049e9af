"""Constants for the kube-tagger operator."""

# Controller identity
CONTROLLER_NAME = "kube-tagger"

# Watched resource
CLAIM_VERSION = "v1"
CLAIM_PLURAL = "persistentvolumeclaims"

# Watch event types acted upon
EVENT_ADDED = "ADDED"
EVENT_MODIFIED = "MODIFIED"
# kopf delivers the watch's initial listing of existing claims with no type
EVENT_INITIAL_LISTING = None
HANDLED_EVENT_TYPES = frozenset({EVENT_INITIAL_LISTING, EVENT_ADDED, EVENT_MODIFIED})

# Annotations
ANNOTATION_STORAGE_PROVISIONER = "volume.beta.kubernetes.io/storage-provisioner"
ANNOTATION_TAGS = "volume.beta.kubernetes.io/additional-resource-tags"
ANNOTATION_TAGS_SEPARATOR = "volume.beta.kubernetes.io/additional-resource-tags-separator"

# Supported provisioner
EBS_PROVISIONER = "kubernetes.io/aws-ebs"

# Tag specification
DEFAULT_TAG_SEPARATOR = ","
TAG_KEY_VALUE_SEPARATOR = "="

# EBS volume URLs: aws://<zone>/<volume-id>
VOLUME_URL_SCHEME = "aws:"

# Metrics server
DEFAULT_METRICS_PORT = 2112

# Event Reasons
EVENT_REASON_VOLUME_TAGGED = "VolumeTagged"
EVENT_REASON_TAG_FAILED = "TagFailed"
