"""Raw Flowise event persistence."""

from app.database import ITEMS_COLLECTION
from app.repositories.base import MongoRepository


class FlowiseEventRepository(MongoRepository):
    """Repository for generic chatbot events stored in ``items``."""

    collection_name = ITEMS_COLLECTION
