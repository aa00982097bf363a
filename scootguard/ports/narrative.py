"""
Narrative generator port interface.

This module defines the protocol for the external text-generation service.
"""

from typing import Protocol

class NarrativeGeneratorPort(Protocol):
    """위험 서술 생성기 포트 인터페이스"""

    async def generate(self, prompt: str) -> str:
        """
        프롬프트로 서술 텍스트를 생성합니다.

        Args:
            prompt: 프롬프트 텍스트

        Returns:
            생성된 텍스트

        Raises:
            GeneratorUnavailable: 생성기 호출 실패
        """
        ...
