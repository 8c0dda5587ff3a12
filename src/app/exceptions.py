"""
Application Exceptions

Orchestration and service failures raised by the application layer.
Same shape as domain exceptions: code, i18n key (the message) and context.
"""

from typing import Any, Dict, List, Optional


class ApplicationException(Exception):
    """Base class for application layer failures"""

    code = "APPLICATION_ERROR"
    i18n_key = "errors.application.general_error"

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        self.context = context or {}
        super().__init__(self.i18n_key)

    @property
    def message(self) -> str:
        return self.i18n_key


class PasswordGenerationError(ApplicationException):
    code = "PASSWORD_GENERATION_FAILED"
    i18n_key = "errors.application.password_generation_failed"

    def __init__(self, reason: str, context: Optional[Dict[str, Any]] = None):
        super().__init__({"reason": reason, **(context or {})})


class ServiceConfigurationError(ApplicationException):
    code = "SERVICE_CONFIGURATION_ERROR"
    i18n_key = "errors.application.service_configuration_error"

    def __init__(self, service_name: str, invalid_config: List[str]):
        super().__init__({"service_name": service_name, "invalid_config": invalid_config})


class WorkflowOrchestrationError(ApplicationException):
    code = "WORKFLOW_ORCHESTRATION_ERROR"
    i18n_key = "errors.application.workflow_orchestration_error"

    def __init__(self, workflow_name: str, step: str, reason: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            {"workflow_name": workflow_name, "step": step, "reason": reason, **(context or {})}
        )


class UseCaseExecutionError(ApplicationException):
    code = "USE_CASE_EXECUTION_ERROR"
    i18n_key = "errors.application.use_case_execution_error"

    def __init__(self, use_case_name: str, reason: str, original_error: Optional[BaseException] = None):
        self.original_error = original_error
        super().__init__(
            {
                "use_case_name": use_case_name,
                "reason": reason,
                "original_error": str(original_error) if original_error else None,
            }
        )


class ExternalServiceError(ApplicationException):
    code = "EXTERNAL_SERVICE_ERROR"
    i18n_key = "errors.application.external_service_error"

    def __init__(self, service_name: str, operation: str, error: BaseException, retry_attempts: int = 0):
        self.original_error = error
        super().__init__(
            {
                "service_name": service_name,
                "operation": operation,
                "original_error": str(error),
                "retry_attempts": retry_attempts,
            }
        )


class ApplicationValidationError(ApplicationException):
    code = "APPLICATION_VALIDATION_ERROR"
    i18n_key = "errors.application.validation_error"

    def __init__(self, field: str, value: Any, rule: str):
        super().__init__({"field": field, "value": str(value), "rule": rule})


class ApplicationAuthorizationError(ApplicationException):
    code = "APPLICATION_AUTHORIZATION_ERROR"
    i18n_key = "errors.application.authorization_error"

    def __init__(self, resource: str, action: str, user_id: Optional[str], reason: Optional[str] = None):
        super().__init__({"resource": resource, "action": action, "user_id": user_id, "reason": reason})


class DependencyInjectionError(ApplicationException):
    code = "DEPENDENCY_INJECTION_ERROR"
    i18n_key = "errors.application.dependency_injection_error"

    def __init__(self, dependency_name: str, reason: str):
        super().__init__({"dependency_name": dependency_name, "reason": reason})


class CacheInvalidationError(ApplicationException):
    code = "CACHE_INVALIDATION_FAILED"
    i18n_key = "errors.cache.invalidation_failed"

    def __init__(self, user_id: str, reason: str):
        super().__init__({"user_id": user_id, "reason": reason})
