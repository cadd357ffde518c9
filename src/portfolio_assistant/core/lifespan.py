from contextlib import asynccontextmanager, AsyncExitStack
from fastapi import FastAPI
from portfolio_assistant.config.app_config import get_service_settings
from portfolio_assistant.common.logging.logger import logger
from portfolio_assistant.common.db.session import create_db_engine_context, parse_db_settings_from_service, DBType
from portfolio_assistant.common.services.llm_service.llm_client import ChatCompletionClient, CompletionProvider
from portfolio_assistant.common.services.llm_service.llm_client.protocols import ProvidesProviderInfo
from portfolio_assistant.common.services.llm_service.llm_client.openai_compatible_client import (
    AsyncOpenAICompatibleClient,
    GROQ_BASE_URL,
)
from portfolio_assistant.chat_service.retrieval.knowledge_retriever import KnowledgeRetriever
from portfolio_assistant.chat_service.prompting.system_prompts.portfolio_prompts import get_prompt_policy
from portfolio_assistant.chat_service.handler import ChatHandler

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manages the service's startup and shutdown events.
    Uses the AsyncExitStack to clean up resources.
    Register resources to the app state to be used as dependencies.

    NOTE:
    - Missing store credentials or api key do not stop start up; the chat handler reports them per request.
    - Use stack.enter_async_context when the resource has __aenter__ and __aexit__ support
    - Use stack.push_async_callback to register the clean up method only
    """
    logger.info("Starting Portfolio Assistant service!")

    logger.info("Initializing service resources...")
    settings = get_service_settings()
    # fail fast on an unknown policy name, this is a typo in the deployment config
    policy = get_prompt_policy(settings.CHAT_PROMPT_POLICY)

    async with AsyncExitStack() as stack:

        # Knowledge db engine
        knowledge_retriever = None
        app.state.knowledge_db_engine = None
        knowledge_db_settings = parse_db_settings_from_service(settings, DBType.KnowledgeDB)
        if knowledge_db_settings is None:
            logger.warning("Knowledge db credentials are incomplete; chat requests will fail with a configuration error.")
        else:
            app.state.knowledge_db_engine = await stack.enter_async_context(
                create_db_engine_context(db_settings=knowledge_db_settings)
            )
            knowledge_retriever = KnowledgeRetriever(app.state.knowledge_db_engine)
            logger.info("Knowledge database engine initialized.")

        # Completion client
        completion_client = None
        if not settings.COMPLETION_API_KEY:
            logger.warning("COMPLETION_API_KEY is not set; chat requests will fail with a configuration error.")
        else:
            provider = (
                CompletionProvider.GROQ
                if settings.COMPLETION_BASE_URL.rstrip("/") == GROQ_BASE_URL
                else CompletionProvider.OPENAI_COMPATIBLE
            )
            openai_compatible_client = AsyncOpenAICompatibleClient(
                model_name=settings.COMPLETION_MODEL,
                api_key=settings.COMPLETION_API_KEY,
                base_url=settings.COMPLETION_BASE_URL,
                timeout=settings.COMPLETION_TIMEOUT_SECONDS,
                provider=provider,
            )
            stack.push_async_callback(openai_compatible_client.aclose)
            completion_client = ChatCompletionClient(provider=provider, client=openai_compatible_client)
            model = (
                completion_client.client.model
                if isinstance(completion_client.client, ProvidesProviderInfo)
                else "unknown model"
            )
            logger.info(f"Completion client ({completion_client.provider.value}, {model}) initialized.")

        app.state.chat_handler = ChatHandler(
            knowledge_retriever=knowledge_retriever,
            completion_client=completion_client,
            policy=policy,
            subject_name=settings.ASSISTANT_SUBJECT_NAME,
            projects=settings.PORTFOLIO_PROJECTS,
        )
        logger.info(f"Chat handler initialized with prompt policy '{policy.name}'.")

        try:
            # lets FastAPI process requests during yield
            yield
        finally:
            logger.info("Shutting down service resources...")

        # The AsyncExitStack will automatically call the __aexit__ or registered cleanup
        # methods for all resources entered or pushed to it, in reverse order.
    logger.info("All global resources have been gracefully closed.")
