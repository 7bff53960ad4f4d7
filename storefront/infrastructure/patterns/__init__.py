"""Microservice patterns (circuit breaker, retry, etc.)."""

from storefront.infrastructure.patterns.circuit_breaker import CircuitBreakerService


__all__ = ["CircuitBreakerService"]
