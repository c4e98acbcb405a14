from recipe_reality.app.core.config import get_settings
from recipe_reality.app.services.ai_provider import AIProvider, build_ai_provider


def get_ai_provider() -> AIProvider:
    return build_ai_provider(get_settings())
