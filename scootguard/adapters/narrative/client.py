"""
Chat-completions narrative generator for ScootGuard.

This module provides a client for an OpenAI-compatible chat completions
API that turns the route analysis prompt into a short risk narrative.
"""

import asyncio
import aiohttp
from typing import Dict, List, Optional
from scootguard.core.errors import GeneratorUnavailable
from scootguard.common.retry import retry_with_backoff
from scootguard.observability.logging_setup import get_logger

log = get_logger("scootguard.narrative")

SYSTEM_PROMPT = (
    "You are a campus safety assistant helping students protect their e-scooters "
    "from theft. Be concise, concrete and calm."
)

class ChatNarrativeGenerator:
    """OpenAI 호환 Chat Completions 서술 생성기"""

    def __init__(self,
                 base_url: str,
                 api_key: str,
                 model: str = "gpt-4o",
                 timeout: float = 10.0,
                 max_retries: int = 2,
                 backoff_initial: float = 0.5,
                 backoff_max: float = 4.0):
        """
        초기화합니다.

        Args:
            base_url: API 기본 URL (예: https://api.openai.com/v1)
            api_key: API 키
            model: 모델 이름
            timeout: 요청 타임아웃 (초)
            max_retries: 최대 재시도 횟수
            backoff_initial: 백오프 초기 지연 (초)
            backoff_max: 백오프 최대 지연 (초)
        """
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_initial = backoff_initial
        self.backoff_max = backoff_max
        self.session: Optional[aiohttp.ClientSession] = None

        log.info(f"서술 생성기 초기화됨 model:{model}")

    def _new_session(self) -> aiohttp.ClientSession:
        return aiohttp.ClientSession(
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json"
            },
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        )

    async def __aenter__(self):
        """비동기 컨텍스트 매니저 진입"""
        self.session = self._new_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """비동기 컨텍스트 매니저 종료"""
        await self.close()

    async def close(self) -> None:
        if self.session:
            await self.session.close()
            self.session = None

    def _payload(self, prompt: str) -> Dict:
        messages: List[Dict[str, str]] = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]
        return {"model": self.model, "messages": messages, "temperature": 0.4}

    async def _post(self, session: aiohttp.ClientSession, prompt: str) -> Dict:
        url = f"{self.base_url}/chat/completions"

        async def _request():
            async with session.post(url, json=self._payload(prompt)) as response:
                response.raise_for_status()
                return await response.json()

        return await retry_with_backoff(
            _request,
            max_retries=self.max_retries,
            base_delay=self.backoff_initial,
            max_delay=self.backoff_max,
            retry_on=(aiohttp.ClientError, asyncio.TimeoutError),
        )

    async def generate(self, prompt: str) -> str:
        """
        프롬프트로 위험 서술을 생성합니다.

        Args:
            prompt: 프롬프트 텍스트

        Returns:
            생성된 텍스트

        Raises:
            GeneratorUnavailable: API 키 누락, 통신 실패, 응답 형식 오류
        """
        if not self.api_key:
            raise GeneratorUnavailable("narrative generator API key is not configured")

        try:
            if self.session is not None:
                data = await self._post(self.session, prompt)
            else:
                async with self._new_session() as session:
                    data = await self._post(session, prompt)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            log.error(f"서술 생성 요청 실패 error:{str(e)}")
            raise GeneratorUnavailable(f"narrative request failed: {e}") from e
        except ValueError as e:
            # 본문이 JSON으로 해석되지 않음
            log.error(f"서술 응답 JSON 파싱 실패 error:{str(e)}")
            raise GeneratorUnavailable("narrative response is not valid JSON") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            log.error(f"서술 응답 형식 오류 data:{data}")
            raise GeneratorUnavailable("unexpected narrative response format") from e

        if not isinstance(content, str) or not content.strip():
            raise GeneratorUnavailable("empty narrative response")

        return content.strip()
