class HostError(Exception):
    """A host capability rejected the request."""


class NoActiveEditorError(HostError):
    def __init__(self, action: str) -> None:
        super().__init__(f"No active text editor to {action}.")


class UnknownActionError(HostError):
    def __init__(self, action_id: str) -> None:
        super().__init__(f"command '{action_id}' not found")
        self.action_id = action_id
