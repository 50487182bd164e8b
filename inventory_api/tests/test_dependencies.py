import os
import unittest
from unittest.mock import MagicMock, patch

from inventory_api import dependencies
from inventory_api.auth import InMemoryIdentityProvider, SupabaseIdentityProvider
from inventory_api.config import Settings
from inventory_api.db import InMemoryDbClient, SqlDbClient, SupabaseDbClient
from inventory_api.storage import InMemoryStorageClient, R2StorageClient


class SettingsTests(unittest.TestCase):
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)
        self.assertEqual(settings.port, 3333)
        self.assertEqual(settings.host, "0.0.0.0")
        self.assertEqual(settings.upload_url_expires_in, 900)
        self.assertEqual(settings.cors_origins, ["*"])
        self.assertFalse(settings.supabase_configured)
        self.assertFalse(settings.r2_configured)

    def test_reads_legacy_env_names(self):
        env = {
            "SUPABASE_URL": "https://proj.supabase.co",
            "SUPABASE_KEY": "anon",
            "R2ACCOUNTID": "acct",
            "R2ACCESSKEY": "key",
            "R2SECRETACCESSKEY": "secret",
            "R2_BUCKET": "produtos",
            "PORT": "8080",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = Settings(_env_file=None)
        self.assertEqual(settings.port, 8080)
        self.assertEqual(settings.r2_account_id, "acct")
        self.assertEqual(settings.r2_secret_access_key, "secret")
        self.assertTrue(settings.supabase_configured)
        self.assertTrue(settings.r2_configured)


class DependencyWiringTests(unittest.TestCase):
    def setUp(self):
        dependencies.reset_clients()
        self.addCleanup(dependencies.reset_clients)

    def _settings(self, **kwargs) -> Settings:
        with patch.dict(os.environ, {}, clear=True):
            return Settings(_env_file=None, **kwargs)

    @patch("inventory_api.dependencies.get_settings")
    def test_falls_back_to_in_memory(self, mock_settings):
        mock_settings.return_value = self._settings()
        self.assertIsInstance(dependencies.get_db_client(), InMemoryDbClient)
        self.assertIsInstance(
            dependencies.get_identity_provider(), InMemoryIdentityProvider
        )
        self.assertIsInstance(dependencies.get_storage_client(), InMemoryStorageClient)

    @patch("inventory_api.dependencies.get_settings")
    def test_clients_are_singletons(self, mock_settings):
        mock_settings.return_value = self._settings(use_in_memory_backends=True)
        self.assertIs(dependencies.get_db_client(), dependencies.get_db_client())
        self.assertIs(
            dependencies.get_storage_client(), dependencies.get_storage_client()
        )

    @patch("inventory_api.dependencies.create_identity_client")
    @patch("inventory_api.dependencies.create_client")
    @patch("inventory_api.dependencies.get_settings")
    def test_supabase_db_and_identity_use_separate_clients(
        self, mock_settings, mock_create_client, mock_create_identity_client
    ):
        mock_settings.return_value = self._settings(
            supabase_url="https://proj.supabase.co", supabase_key="anon"
        )
        mock_create_client.return_value = MagicMock()
        mock_create_identity_client.return_value = MagicMock()
        db = dependencies.get_db_client()
        identity = dependencies.get_identity_provider()
        self.assertIsInstance(db, SupabaseDbClient)
        self.assertIsInstance(identity, SupabaseIdentityProvider)
        mock_create_client.assert_called_once_with("https://proj.supabase.co", "anon")
        mock_create_identity_client.assert_called_once_with(
            "https://proj.supabase.co", "anon"
        )
        self.assertIsNot(db._client, identity._client)

    @patch("inventory_api.dependencies.get_settings")
    def test_database_url_selects_sql_client(self, mock_settings):
        mock_settings.return_value = self._settings(
            database_url="sqlite+pysqlite:///:memory:"
        )
        self.assertIsInstance(dependencies.get_db_client(), SqlDbClient)

    @patch("inventory_api.dependencies.get_settings")
    def test_r2_storage(self, mock_settings):
        mock_settings.return_value = self._settings(
            r2_account_id="acct",
            r2_access_key="key",
            r2_secret_access_key="secret",
            r2_bucket="produtos",
            r2_public_url="https://pub.example.r2.dev",
        )
        storage = dependencies.get_storage_client()
        self.assertIsInstance(storage, R2StorageClient)
        self.assertEqual(
            storage.public_url("uploads/a.png"), "https://pub.example.r2.dev/uploads/a.png"
        )

    @patch("inventory_api.dependencies.get_settings")
    def test_r2_without_public_url_warns(self, mock_settings):
        mock_settings.return_value = self._settings(
            r2_account_id="acct",
            r2_access_key="key",
            r2_secret_access_key="secret",
            r2_bucket="produtos",
        )
        with self.assertLogs("inventory_api.dependencies", level="WARNING") as logs:
            storage = dependencies.get_storage_client()
        self.assertIsInstance(storage, R2StorageClient)
        self.assertIn("R2_PUBLIC_URL not set", logs.output[0])


if __name__ == "__main__":
    unittest.main()
