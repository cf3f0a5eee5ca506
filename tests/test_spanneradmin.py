from spanops.core.adapters.spanneradmin import SpannerAdminAdapter
from spanops.core.models import DatabaseRef, InstanceRef


class _Database:
    def __init__(self, log, name, ddl_statements=()):
        self.log = log
        self.name = name
        self.ddl_statements = list(ddl_statements)

    def create(self):
        self.log.append(("database.create", self.name, self.ddl_statements))
        return "database-op"

    def drop(self):
        self.log.append(("database.drop", self.name))


class _Instance:
    def __init__(self, log, instance_id, **kwargs):
        self.log = log
        self.instance_id = instance_id
        self.kwargs = kwargs

    def create(self):
        self.log.append(("instance.create", self.instance_id, self.kwargs))
        return "instance-op"

    def delete(self):
        self.log.append(("instance.delete", self.instance_id))

    def database(self, name, ddl_statements=()):
        return _Database(self.log, name, ddl_statements)


class _Client:
    project_name = "projects/my-project"

    def __init__(self):
        self.log = []

    def instance(self, instance_id, **kwargs):
        return _Instance(self.log, instance_id, **kwargs)

    def close(self):
        self.log.append(("client.close",))


def test_create_instance_uses_full_config_path_and_processing_units():
    client = _Client()
    adapter = SpannerAdminAdapter(client)

    op = adapter.create_instance(
        InstanceRef(
            project="my-project",
            instance_id="test-instance",
            config_id="regional-us-central1",
            display_name="test-instance",
            processing_units=100,
        )
    )

    assert op == "instance-op"
    assert client.log == [
        (
            "instance.create",
            "test-instance",
            {
                "configuration_name": "projects/my-project/instanceConfigs/regional-us-central1",
                "display_name": "test-instance",
                "processing_units": 100,
            },
        )
    ]


def test_database_calls_target_the_right_instance():
    client = _Client()
    adapter = SpannerAdminAdapter(client)

    op = adapter.create_database(DatabaseRef(instance_id="test-instance", database_name="r2dbc-db"))
    adapter.drop_database("test-instance", "r2dbc-db")
    adapter.delete_instance("test-instance")
    adapter.close()

    assert op == "database-op"
    assert client.log == [
        ("database.create", "r2dbc-db", []),
        ("database.drop", "r2dbc-db"),
        ("instance.delete", "test-instance"),
        ("client.close",),
    ]
