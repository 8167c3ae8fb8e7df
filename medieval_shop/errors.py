"""Error taxonomy shared by the server and the kiosk core.

Nothing here is fatal to the process. Routes translate these into HTTP
responses; the kiosk core recovers from them locally.
"""


class ShopError(Exception):
    """Base class for all domain errors."""


class InvalidInput(ShopError):
    """A required field (question, answer) was empty. Not retried."""


class UpstreamUnavailable(ShopError):
    """The text-generation service or the profile store failed.

    `user_message` is safe to show to a player; the exception text is not.
    """

    user_message = "The oracle is silent. Pray try again anon."


class MalformedUpstreamOutput(ShopError):
    """An upstream payload could not be parsed (score, question list)."""


class ResourceMissing(ShopError):
    """Visual assets for an actor type are not available on the stage."""

    def __init__(self, actor_type: str) -> None:
        super().__init__(f"Required assets not found for {actor_type!r}")
        self.actor_type = actor_type
