"""
Error taxonomy for ScootGuard.

Validation errors are caller contract violations and are never retried.
Generator failures are recovered by the orchestrator with a fallback narrative.
"""

class ValidationError(ValueError):
    """좌표 누락/비유한 값 등 요청 검증 실패"""

    def __init__(self, field: str, message: str = ""):
        self.field = field
        super().__init__(message or f"{field} is required and must be a finite number")

class GeneratorUnavailable(RuntimeError):
    """서술 생성기 호출 실패 또는 타임아웃"""

class SearchCancelled(RuntimeError):
    """대체 후보지 격자 탐색이 취소됨"""
