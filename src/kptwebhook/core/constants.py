"""Constants, suffixes and kind lists used throughout the transformer."""

# FunctionConfig identity (Webhook.v1alpha1.fn.kpt.dev)
FN_CONFIG_GROUP = "fn.kpt.dev"
FN_CONFIG_VERSION = "v1alpha1"
FN_CONFIG_KIND = "Webhook"
FN_CONFIG_API_VERSION = f"{FN_CONFIG_GROUP}/{FN_CONFIG_VERSION}"

# ConfigMap key holding the embedded webhook configuration
CONFIGMAP_WEBHOOK_KEY = "webhook"

# The ConfigMap name generated by the kpt variant constructor
BUILTIN_CONFIGMAP_NAME = "kptfile.kpt.dev"

OPERATION_ADD = "add"
OPERATION_DELETE = "delete"
OPERATIONS = (OPERATION_ADD, OPERATION_DELETE)

# Name parts
WEBHOOK_PREFIX = "webhook"
SERVICE_SUFFIX = "svc"
CERT_SUFFIX = "serving-cert"
CERT_PATH_SUFFIX = "serving-certs"
MUTATING_SUFFIX = "mutating-configuration"
VALIDATING_SUFFIX = "validating-configuration"

# Selector label carried by the webhook Service
SELECTOR_LABEL_KEY = f"{BUILTIN_CONFIGMAP_NAME}/{VALIDATING_SUFFIX}"

# cert-manager CA injection
CERT_INJECTION_KEY = "cert-manager.io/inject-ca-from"

# Secret volume defaults (0644)
CERT_VOLUME_DEFAULT_MODE = 420

# Service port defaults when the config leaves them at zero
DEFAULT_SERVICE_PORT = 443
DEFAULT_TARGET_PORT = 9443

# Kinds
CRD_KIND = "CustomResourceDefinition"
SERVICE_KIND = "Service"
CERTIFICATE_KIND = "Certificate"
MUTATING_KIND = "MutatingWebhookConfiguration"
VALIDATING_KIND = "ValidatingWebhookConfiguration"

# K8s kinds carrying a pod template at spec.template.spec
WORKLOAD_KINDS = (
    "ReplicationController", "Deployment", "ReplicaSet", "StatefulSet", "DaemonSet",
)

# API versions of the generated resources
SERVICE_API_VERSION = "v1"
CERTIFICATE_API_VERSION = "cert-manager.io/v1"
ADMISSION_API_VERSION = "admissionregistration.k8s.io/v1"

# kpt ResourceList envelope and per-item annotations
RESOURCE_LIST_API_VERSION = "config.kubernetes.io/v1"
RESOURCE_LIST_KIND = "ResourceList"
PATH_ANNOTATIONS = ("internal.config.kubernetes.io/path", "config.kubernetes.io/path")
INDEX_ANNOTATIONS = ("internal.config.kubernetes.io/index", "config.kubernetes.io/index")
