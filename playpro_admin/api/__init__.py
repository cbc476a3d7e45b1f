"""REST backend access: client, resource services, auth and dashboard counts."""

from .client import ApiSettings, BackendClient, build_form_data, run_sync, unwrap
from .resources import ResourceService, download_file, upload_file

__all__ = [
    "ApiSettings",
    "BackendClient",
    "ResourceService",
    "build_form_data",
    "download_file",
    "run_sync",
    "unwrap",
    "upload_file",
]
