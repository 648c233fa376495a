"""Optional Azure Blob Storage mirror for database backups."""
import logging
import os

from azure.storage.blob import BlobServiceClient

import config

logger = logging.getLogger(__name__)

_blob_service = None


def is_configured() -> bool:
     return bool(config.AZURE_STORAGE_ACCOUNT and config.AZURE_STORAGE_KEY)


def get_blob_service() -> BlobServiceClient:
     global _blob_service
     if _blob_service is None:
          _blob_service = BlobServiceClient.from_connection_string(
               f"DefaultEndpointsProtocol=https;"
               f"AccountName={config.AZURE_STORAGE_ACCOUNT};"
               f"AccountKey={config.AZURE_STORAGE_KEY};"
               f"EndpointSuffix=core.windows.net"
          )
     return _blob_service


def upload_backup(path: str, container: str = None) -> str:
     container = container or config.AZURE_BACKUP_CONTAINER
     blob_name = os.path.basename(path)
     blob_client = get_blob_service().get_blob_client(container=container, blob=blob_name)
     with open(path, "rb") as data:
          blob_client.upload_blob(data, overwrite=True)
     logger.info("Mirrored backup %s to container %s", blob_name, container)
     return f"https://{config.AZURE_STORAGE_ACCOUNT}.blob.core.windows.net/{container}/{blob_name}"


def delete_backup(blob_name: str, container: str = None):
     """
     Deletes a mirrored backup from Azure Blob Storage by file name
     """
     container = container or config.AZURE_BACKUP_CONTAINER
     blob_client = get_blob_service().get_blob_client(
          container=container,
          blob=blob_name
     )
     blob_client.delete_blob()
