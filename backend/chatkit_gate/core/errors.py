from __future__ import annotations


class ChatKitGateError(Exception):
    """Base error rendered to clients as ``{"error": message}``."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(ChatKitGateError):
    status_code = 500

    def __init__(self, setting_name: str) -> None:
        super().__init__(f"Server missing {setting_name}")
        self.setting_name = setting_name


class MalformedRequestError(ChatKitGateError):
    status_code = 400


class UpstreamFailure(ChatKitGateError):
    status_code = 500

    def __init__(self, message: str = "Unable to start chat session") -> None:
        super().__init__(message)
