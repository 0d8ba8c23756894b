from fastapi import status


class AnalyticsError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AnalyticsError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(AnalyticsError):
    status_code = status.HTTP_404_NOT_FOUND


class DependencyError(AnalyticsError):
    """A store read or write failed. The caller sees a server error."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class InvalidInteractionType(ValidationError):
    def __init__(self, interaction_type):
        super().__init__(f"Invalid interaction type: {interaction_type!r}")
        self.interaction_type = interaction_type


class AgentNotFound(NotFoundError):
    def __init__(self, agent_id):
        super().__init__("Agent not found")
        self.agent_id = agent_id
