"""Error hierarchy for the webhook transformer.

Leaf components raise these; the loader and the orchestrator catch them and
turn them into results so that a single bad document never stops the pass.
"""


class WebhookError(Exception):
    """Base error for everything raised by the transformer."""

    category = "internal"

    def __init__(self, message: str, resource: dict | None = None):
        super().__init__(message)
        self.resource = resource


class ConfigError(WebhookError):
    """Function config has an unknown shape, cannot be decoded or is invalid."""

    category = "configuration"


class BuildError(WebhookError):
    """A companion resource could not be built."""

    category = "build"


class ContractError(BuildError):
    """A builder was called with a context it does not accept."""

    category = "contract"

    def __str__(self) -> str:
        return f"internal error: {super().__str__()}"


class InjectionError(WebhookError):
    """The certificate volume could not be wired into the workload."""

    category = "injection"


class ResourceListError(WebhookError):
    """The ResourceList envelope cannot be read or written."""

    category = "transport"
