"""Domain error taxonomy shared by services, repositories, and the API layer.

The API maps each class to a status code in ``thinkscore.api.app``:
InvalidInputError -> 422, NotFoundError -> 404, UpstreamDataError and
EvaluationFailedError -> 502.
"""


class ThinkScoreError(Exception):
    """Base class for expected, typed failures."""


class InvalidInputError(ThinkScoreError):
    """A parameter was rejected before any storage or LLM call."""


class NotFoundError(ThinkScoreError):
    """A single required row does not exist."""


class UpstreamDataError(ThinkScoreError):
    """The persistence gateway reported a failure other than a missing row."""


class EvaluationFailedError(ThinkScoreError):
    """Answer evaluation failed.

    The message is deliberately generic; provider detail is only logged
    and stored on the usage log row.
    """

    def __init__(self, message: str = "답변 평가 중 오류가 발생했습니다.") -> None:
        super().__init__(message)
