"""
Dependency injection for FastAPI endpoints.
"""

from thinkscore.answers.repository import AnswerRepository
from thinkscore.evaluation.config import EvaluationConfig
from thinkscore.evaluation.llm_client import LLMClient
from thinkscore.evaluation.service import AnswerEvaluationService
from thinkscore.forum.config import ForumConfig
from thinkscore.forum.repository import ForumRepository
from thinkscore.profiles.repository import ProfileRepository
from thinkscore.questions.repository import QuestionRepository
from thinkscore.rankings.config import RankingConfig
from thinkscore.rankings.service import RankingService
from thinkscore.scores.repository import ScoreRepository
from thinkscore.storage.database import Database
from thinkscore.storage.gateway import TableGateway
from thinkscore.usage_logs.repository import UsageLogRepository

# Global instances (initialized on first request)
_database: Database | None = None
_gateway: TableGateway | None = None
_llm_client: LLMClient | None = None
_evaluation_service: AnswerEvaluationService | None = None
_ranking_service: RankingService | None = None
_forum_config: ForumConfig | None = None


async def get_database() -> Database:
    """Get the connected database, creating the pool on first use."""
    global _database

    if _database is None:
        _database = Database()
        await _database.connect()

    return _database


async def get_gateway() -> TableGateway:
    """Get the table gateway over the shared database pool."""
    global _gateway

    if _gateway is None:
        _gateway = TableGateway(await get_database())

    return _gateway


async def get_llm_client() -> LLMClient:
    """Get the LLM client (the OpenAI SDK is loaded on the first call)."""
    global _llm_client

    if _llm_client is None:
        _llm_client = LLMClient(EvaluationConfig())

    return _llm_client


async def get_evaluation_service() -> AnswerEvaluationService:
    """
    Get answer evaluation service instance.

    Creates a singleton wired to the shared gateway and LLM client.
    """
    global _evaluation_service

    if _evaluation_service is None:
        gateway = await get_gateway()
        _evaluation_service = AnswerEvaluationService(
            llm=await get_llm_client(),
            usage_logs=UsageLogRepository(gateway),
            scores=ScoreRepository(gateway),
            config=EvaluationConfig(),
        )

    return _evaluation_service


async def get_ranking_service() -> RankingService:
    """Get ranking service instance."""
    global _ranking_service

    if _ranking_service is None:
        _ranking_service = RankingService(await get_gateway(), RankingConfig())

    return _ranking_service


async def get_usage_log_repository() -> UsageLogRepository:
    return UsageLogRepository(await get_gateway())


async def get_question_repository() -> QuestionRepository:
    return QuestionRepository(await get_gateway())


async def get_answer_repository() -> AnswerRepository:
    return AnswerRepository(await get_gateway())


async def get_score_repository() -> ScoreRepository:
    return ScoreRepository(await get_gateway())


async def get_profile_repository() -> ProfileRepository:
    return ProfileRepository(await get_gateway())


async def get_forum_repository() -> ForumRepository:
    global _forum_config

    if _forum_config is None:
        _forum_config = ForumConfig()

    return ForumRepository(await get_gateway(), _forum_config)


async def cleanup_dependencies() -> None:
    """Clean up global dependencies on shutdown."""
    global _database, _gateway, _llm_client, _evaluation_service, _ranking_service

    _evaluation_service = None
    _ranking_service = None
    _gateway = None

    if _llm_client is not None:
        await _llm_client.close()
        _llm_client = None

    if _database is not None:
        await _database.close()
        _database = None
