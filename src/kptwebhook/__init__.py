"""kptwebhook — kpt function exposing an admission webhook.

Adds (or removes) the Service, cert-manager Certificate and
Mutating/Validating webhook configurations a webhook needs, and mounts the
serving certificate into the workload that runs it.
"""

from kptwebhook.pacts.types import Result, WebhookConfig
from kptwebhook.core.config import load_config
from kptwebhook.core.transform import run, transform

__version__ = "0.1.0"

__all__ = ["Result", "WebhookConfig", "load_config", "run", "transform"]
