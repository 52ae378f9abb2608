"""
===============================================================================
ARCHIVO: crosscutting/metrics.py
===============================================================================

CRC CARD (Módulo)
-------------------------------------------------------------------------------
Nombre:
    Métricas (Prometheus)

Responsabilidades:
    - Definir métricas HTTP y de llamadas al gateway.
    - Proveer funciones pequeñas y estables para registrar eventos/duraciones.
    - Cuidar cardinalidad (share ids y tokens se colapsan a {id}).
    - Exponer helpers para generar la respuesta /metrics.

Colaboradores:
    - crosscutting.middleware: registra latencia y conteo HTTP.
    - infrastructure.gateway.grpc_gateway_client: cuenta RPCs por resultado.
    - api.main: expone /metrics.
===============================================================================
"""

from __future__ import annotations

import re

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Registro propio: evita colisiones con el registry global en tests/reloads.
_registry = CollectorRegistry()

_requests_total = Counter(
    "ocs_requests_total",
    "Total de requests HTTP",
    ["endpoint", "method", "status"],
    registry=_registry,
)

_request_latency = Histogram(
    "ocs_request_latency_seconds",
    "Latencia de requests HTTP (segundos)",
    ["endpoint", "method"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
    registry=_registry,
)

_gateway_calls_total = Counter(
    "ocs_gateway_calls_total",
    "Llamadas al gateway por método y resultado",
    ["method", "outcome"],
    registry=_registry,
)

_gateway_latency = Histogram(
    "ocs_gateway_call_latency_seconds",
    "Latencia de llamadas al gateway (segundos)",
    ["method"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
    registry=_registry,
)

# Segmentos tras /shares/ que son rutas fijas, no ids.
_STATIC_SEGMENTS = {"pending", "remote_shares"}


def record_request_metrics(
    endpoint: str,
    method: str,
    status_code: int,
    latency_seconds: float,
) -> None:
    """Registra métricas HTTP.

    - endpoint se normaliza para no explotar cardinalidad.
    - status se agrupa por 2xx/4xx/5xx.
    """
    normalized = _normalize_endpoint(endpoint)
    _requests_total.labels(
        endpoint=normalized,
        method=method,
        status=_status_bucket(status_code),
    ).inc()
    _request_latency.labels(endpoint=normalized, method=method).observe(
        latency_seconds
    )


def record_gateway_call(method: str, outcome: str, latency_seconds: float) -> None:
    """outcome: ok | status | transport_error."""
    _gateway_calls_total.labels(method=method, outcome=outcome).inc()
    _gateway_latency.labels(method=method).observe(latency_seconds)


def _normalize_endpoint(path: str) -> str:
    """Reemplaza share ids por `{id}` (conserva pending/remote_shares)."""

    def _collapse(match: re.Match) -> str:
        segment = match.group(1)
        if segment in _STATIC_SEGMENTS:
            return match.group(0)
        return "/shares/{id}"

    path = re.sub(r"/shares/([^/]+)", _collapse, path)
    path = re.sub(r"/(pending|remote_shares)/[^/]+", r"/\1/{id}", path)
    return path


def _status_bucket(code: int) -> str:
    """Agrupa status code para baja cardinalidad."""
    if 200 <= code < 300:
        return "2xx"
    if 400 <= code < 500:
        return "4xx"
    if 500 <= code < 600:
        return "5xx"
    return "other"


def get_metrics_response() -> tuple[bytes, str]:
    """Genera el body y content-type para /metrics."""
    return generate_latest(_registry), CONTENT_TYPE_LATEST
