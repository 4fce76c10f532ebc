from __future__ import annotations

from dependency_injector import containers, providers

from core.settings import SETTINGS
from infra.resources import DatabaseResource, OpenAIResource


class InfrastructureContainer(containers.DeclarativeContainer):
    # Database
    database = providers.Resource(
        DatabaseResource,
        database_url=str(SETTINGS.DATABASE.DATABASE_URL),
    )

    # Completion provider
    openai_client = providers.Resource(
        OpenAIResource,
        api_key=SETTINGS.OPENAI.OPENAI_API_KEY.get_secret_value(),
        base_url=SETTINGS.OPENAI.OPENAI_BASE_URL,
        timeout=SETTINGS.OPENAI.OPENAI_TIMEOUT_SECONDS,
    )


class ServiceContainer(containers.DeclarativeContainer):
    """Application services - depends on infrastructure."""

    infrastructure = providers.DependenciesContainer()

    # Services
    conversation_service = providers.Factory(
        "api.features.conversation.service.ConversationService",
        default_title=SETTINGS.TUTOR.DEFAULT_CONVERSATION_TITLE,
    )

    # Resolved by the sign-in flow, which owns the identity provider callback
    user_service = providers.Factory(
        "api.features.users.service.UserService",
        owner_open_id=SETTINGS.TUTOR.OWNER_OPEN_ID,
    )

    # Exchange pipeline
    system_prompt = providers.Callable(
        "api.features.tutor.prompts.build_system_prompt",
        extra_instructions=SETTINGS.TUTOR.SYSTEM_PROMPT_EXTRA,
    )

    context_builder = providers.Singleton(
        "api.features.tutor.context.ContextWindowBuilder",
        window_size=SETTINGS.TUTOR.CONTEXT_WINDOW_SIZE,
        system_prompt=system_prompt,
    )

    llm_gateway = providers.Factory(
        "api.features.tutor.gateway.OpenAIChatGateway",
        client_resource=infrastructure.openai_client,
        model=SETTINGS.OPENAI.OPENAI_MODEL,
        temperature=SETTINGS.OPENAI.OPENAI_TEMPERATURE,
        max_tokens=SETTINGS.OPENAI.OPENAI_MAX_TOKENS,
        timeout=SETTINGS.OPENAI.OPENAI_TIMEOUT_SECONDS,
    )

    tutor_service = providers.Factory(
        "api.features.tutor.service.TutorService",
        gateway=llm_gateway,
        context_builder=context_builder,
    )


class ControllerContainer(containers.DeclarativeContainer):
    """Controller-specific dependencies."""

    services = providers.DependenciesContainer()

    # Controllers
    conversation_controller = providers.Factory(
        "api.features.conversation.controller.ConversationController",
        conversation_service=services.conversation_service,
    )

    tutor_controller = providers.Factory(
        "api.features.tutor.controller.TutorController",
        tutor_service=services.tutor_service,
    )


class ApplicationContainer(containers.DeclarativeContainer):
    """Main application container composing all sub-containers."""

    wiring_config = containers.WiringConfiguration(
        modules=[
            "api.main",
            "api.shared.db",
            "api.features.conversation.router",
            "api.features.tutor.router",
        ]
    )

    infrastructure = providers.Container(InfrastructureContainer)
    services = providers.Container(ServiceContainer, infrastructure=infrastructure)
    controllers = providers.Container(ControllerContainer, services=services)
