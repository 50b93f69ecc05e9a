"""
Tabla de flags del binario (campo del modelo → nombre de flag).

Es el contrato con el parser de flags del binario: los nombres se mantienen
exactos aunque el campo tenga otro nombre (chunck_pool_size → chunk-pool-size).
El orden de la tabla es el orden en que se generan los argumentos.
"""

from typing import Dict, Tuple


STORE_FLAGS: Dict[str, str] = {
    "log_level": "log.level",
    "log_format": "log.format",
    "tracing_config_file": "tracing.config-file",
    "http_address": "http-address",
    "http_grace_period": "http-grace-period",
    "grpc_address": "grpc-address",
    "grpc_grace_period": "grpc-grace-period",
    "grpc_server_tls_cert": "grpc-server-tls-cert",
    "grpc_server_tls_key": "grpc-server-tls-key",
    "grpc_server_tls_client_ca": "grpc-server-tls-client-ca",
    "data_dir": "data-dir",
    "index_cache_config_file": "index-cache.config-file",
    "index_cache_size": "index-cache-size",
    "chunck_pool_size": "chunk-pool-size",
    "store_grpc_series_sample_limit": "store.grpc.series-sample-limit",
    "store_grpc_series_max_concurrency": "store.grpc.series-max-concurrency",
    "objstore_config_file": "objstore.config-file",
    "sync_block_duration": "sync-block-duration",
    "block_sync_concurrency": "block-sync-concurrency",
    "min_time": "min-time",
    "max_time": "max-time",
    "selector_relabel_config_file": "selector.relabel-config-file",
    "consistency_delay": "consistency-delay",
    "ignore_deletion_marks_delay": "ignore-deletion-marks-delay",
    "web_external_prefix": "web.external-prefix",
    "web_prefix_header": "web.prefix-header",
}

# Campos que describen el proceso y no generan flags
IDENTITY_FIELDS: Tuple[str, ...] = (
    "ensure",
    "user",
    "group",
    "bin_path",
    "max_open_files",
    "extra_params",
)

# Flags que el modo estricto no deja pisar desde extra_params
PROTECTED_FLAGS: Tuple[str, ...] = ("data-dir",)
