"""Domain errors raised by the service layer and their HTTP mapping."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class QuestTrackerError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidStatusError(QuestTrackerError, ValueError):
    def __init__(self, value: str):
        super().__init__(f"Invalid status: {value}")
        self.value = value


class ReservedStatusError(QuestTrackerError, ValueError):
    def __init__(self, message: str = "This status is reserved for core quests only."):
        super().__init__(message)


class QuestNotFoundError(QuestTrackerError, LookupError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, quest_id: int):
        super().__init__("Quest not found")
        self.quest_id = quest_id


class UserQuestNotFoundError(QuestTrackerError, LookupError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, quest_id: int):
        super().__init__("User quest not found")
        self.quest_id = quest_id


class UserQuestExistsError(QuestTrackerError):
    def __init__(self, quest_id: int):
        super().__init__("Quest already started by this user")
        self.quest_id = quest_id


class PermissionDeniedError(QuestTrackerError):
    status_code = status.HTTP_403_FORBIDDEN


async def quest_tracker_error_handler(request: Request, exc: QuestTrackerError) -> JSONResponse:
    logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(QuestTrackerError, quest_tracker_error_handler)
