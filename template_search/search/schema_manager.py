import logging
from typing import Dict

from ..errors import SchemaError, TransportError
from .mappings import IndexDefinition

logger = logging.getLogger("template_search.schema")


class IndexSchemaManager:
    """
    Makes sure every index exists with its mappings and analyzers.

    An existing index is left alone: mappings are not diffed or migrated.
    Schema changes go through `recreate`, which drops the index first.
    """

    def __init__(self, gateway, definitions: Dict[str, IndexDefinition]):
        self.gateway = gateway
        self.definitions = definitions

    def definition(self, kind: str) -> IndexDefinition:
        try:
            return self.definitions[kind]
        except KeyError:
            raise SchemaError(f"Unknown index kind {kind!r}")

    async def ensure_index(self, definition: IndexDefinition) -> bool:
        """
        Create the index if it does not exist yet.

        Returns True when this call created it.
        """
        try:
            if await self.gateway.index_exists(definition.name):
                logger.debug("Index %r already present", definition.name)
                return False
            return await self.gateway.create_index(definition.name, definition.create_body())
        except TransportError as e:
            raise SchemaError(
                f"Could not ensure index: {e.message}",
                operation=e.operation or "ensure_index",
                index=definition.name,
            ) from e

    async def ensure_all(self) -> Dict[str, bool]:
        """Bootstrap every index; any failure aborts."""
        created = {}
        for kind, definition in self.definitions.items():
            created[kind] = await self.ensure_index(definition)
        return created

    async def recreate(self, kind: str) -> None:
        definition = self.definition(kind)
        logger.warning("Dropping and recreating index %r", definition.name)
        try:
            await self.gateway.delete_index(definition.name)
        except TransportError as e:
            raise SchemaError(
                f"Could not drop index: {e.message}",
                operation="delete_index",
                index=definition.name,
            ) from e
        await self.ensure_index(definition)
