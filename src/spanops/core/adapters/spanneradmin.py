from __future__ import annotations

from google.api_core.operation import Operation
from google.cloud import spanner

from spanops.core.models import DatabaseRef, InstanceRef


class SpannerAdminAdapter:
    """Adapter around the google-cloud-spanner instance and database admin APIs."""

    def __init__(self, client: spanner.Client) -> None:
        self.client = client

    def _config_name(self, config_id: str) -> str:
        """Return the full resource path of an instance configuration."""
        return f"{self.client.project_name}/instanceConfigs/{config_id}"

    def create_instance(self, instance: InstanceRef) -> Operation:
        """Submit an instance create; capacity is set in processing units."""
        handle = self.client.instance(
            instance.instance_id,
            configuration_name=self._config_name(instance.config_id),
            display_name=instance.display_name,
            processing_units=instance.processing_units,
        )
        return handle.create()

    def create_database(self, database: DatabaseRef) -> Operation:
        """Submit a database create with its initial DDL statements."""
        handle = self.client.instance(database.instance_id).database(
            database.database_name,
            ddl_statements=list(database.ddl_statements),
        )
        return handle.create()

    def drop_database(self, instance_id: str, database_name: str) -> None:
        """Drop a database by name."""
        self.client.instance(instance_id).database(database_name).drop()

    def delete_instance(self, instance_id: str) -> None:
        """Delete an instance by id."""
        self.client.instance(instance_id).delete()

    def close(self) -> None:
        """Release the client's transport."""
        self.client.close()
