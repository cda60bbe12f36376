"""Tests for storage and kvdb backend validation."""

from __future__ import annotations

import pytest

from worldconf.errors import BackendValidationError
from worldconf.models import KVDBConfig, StorageConfig
from worldconf.validators import validate_kvdb_config, validate_storage_config


class TestStorageValidation:
    """Required fields per storage type."""

    def test_filesystem_requires_directory(self):
        validate_storage_config(StorageConfig(type="filesystem", directory="/var/entities"))
        with pytest.raises(BackendValidationError, match="directory"):
            validate_storage_config(StorageConfig(type="filesystem", directory=""))

    def test_mongodb_requires_url_and_db(self):
        validate_storage_config(StorageConfig(type="mongodb", url="mongodb://localhost", db="world"))
        with pytest.raises(BackendValidationError, match="url"):
            validate_storage_config(StorageConfig(type="mongodb", url="", db="world"))
        with pytest.raises(BackendValidationError, match="db"):
            validate_storage_config(StorageConfig(type="mongodb", url="mongodb://localhost", db=""))

    def test_redis_requires_url(self):
        with pytest.raises(BackendValidationError, match="url"):
            validate_storage_config(StorageConfig(type="redis", url="", db="0"))

    def test_redis_db_must_be_integer(self):
        validate_storage_config(StorageConfig(type="redis", url="redis://localhost", db="3"))
        with pytest.raises(BackendValidationError, match="redis db must be integer"):
            validate_storage_config(StorageConfig(type="redis", url="redis://localhost", db="goworld"))

    def test_redis_cluster_requires_start_nodes(self):
        with pytest.raises(BackendValidationError, match="at least 1 start_nodes"):
            validate_storage_config(StorageConfig(type="redis_cluster"))

    def test_redis_cluster_rejects_empty_node(self):
        config = StorageConfig(type="redis_cluster", start_nodes=frozenset({"10.0.0.1:7000", ""}))
        with pytest.raises(BackendValidationError, match="must not be empty"):
            validate_storage_config(config)

    def test_redis_cluster_accepts_nodes(self):
        validate_storage_config(StorageConfig(type="redis_cluster", start_nodes=frozenset({"10.0.0.1:7000"})))

    def test_sql_requires_driver_and_url(self):
        validate_storage_config(StorageConfig(type="sql", driver="mysql", url="user@/world"))
        with pytest.raises(BackendValidationError, match="driver"):
            validate_storage_config(StorageConfig(type="sql", url="user@/world"))
        with pytest.raises(BackendValidationError, match="url"):
            validate_storage_config(StorageConfig(type="sql", driver="mysql"))

    @pytest.mark.parametrize("backend", ["", "cassandra", "MongoDB"])
    def test_unknown_type(self, backend: str):
        with pytest.raises(BackendValidationError, match="unknown storage type"):
            validate_storage_config(StorageConfig(type=backend))

    def test_error_includes_pretty_config(self):
        with pytest.raises(BackendValidationError) as exc_info:
            validate_storage_config(StorageConfig(type="sql", driver="mysql"))

        assert '"driver": "mysql"' in str(exc_info.value)


class TestKVDBValidation:
    """Required fields per kvdb type."""

    def test_empty_type_means_disabled(self):
        validate_kvdb_config(KVDBConfig())

    def test_mongodb_requires_collection(self):
        validate_kvdb_config(KVDBConfig(type="mongodb", url="mongodb://localhost", db="kv", collection="items"))
        with pytest.raises(BackendValidationError, match="collection"):
            validate_kvdb_config(KVDBConfig(type="mongodb", url="mongodb://localhost", db="kv"))

    def test_redis_db_must_be_integer(self):
        with pytest.raises(BackendValidationError, match="redis db must be integer"):
            validate_kvdb_config(KVDBConfig(type="redis", url="redis://localhost", db="kv"))

    def test_redis_cluster_requires_start_nodes(self):
        with pytest.raises(BackendValidationError, match=r"\[kvdb\]"):
            validate_kvdb_config(KVDBConfig(type="redis_cluster"))

    def test_sql_requires_driver_and_url(self):
        validate_kvdb_config(KVDBConfig(type="sql", driver="postgres", url="postgres://localhost/kv"))
        with pytest.raises(BackendValidationError, match="driver"):
            validate_kvdb_config(KVDBConfig(type="sql", url="postgres://localhost/kv"))

    def test_filesystem_is_storage_only(self):
        with pytest.raises(BackendValidationError, match="unknown kvdb storage type"):
            validate_kvdb_config(KVDBConfig(type="filesystem"))
