"""Google Cloud translation, text-to-speech and speech recognition client."""
import base64
import binascii
import logging
from typing import Any, Dict, List, Optional

import httpx

from lingodeck.config import Settings
from lingodeck.exceptions import CredentialMissingError, VendorError
from lingodeck.models.languages import get_language_code, get_locale, get_voice_name
from lingodeck import monitoring

logger = logging.getLogger(__name__)

TRANSLATION_FAILED = "Translation failed. Please try again."
RECOGNITION_FAILED = "Speech recognition failed. Please try again."

# Tried in order; the first config that yields a transcript wins.
# languageCode is filled in per request.
DEFAULT_RECOGNITION_CONFIGS: List[Dict[str, Any]] = [
    {
        "encoding": "ENCODING_UNSPECIFIED",
        "enableAutomaticPunctuation": True,
    },
]


class GoogleCloudClient:
    """Thin async wrapper over the Google Cloud REST endpoints.

    Each call is a single independent request: no retries, no caching.
    The strict methods (translate_text, synthesize, recognize) raise
    CredentialMissingError or VendorError. The fail-closed methods
    (translate, synthesize_speech, transcribe) never raise and return a
    placeholder message or None instead.
    """

    def __init__(
        self,
        api_key: str,
        translate_url: str,
        tts_url: str,
        speech_url: str,
        timeout: float = 30.0,
        recognition_configs: Optional[List[Dict[str, Any]]] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.api_key = api_key
        self.translate_url = translate_url
        self.tts_url = tts_url
        self.speech_url = speech_url
        self.recognition_configs = recognition_configs or DEFAULT_RECOGNITION_CONFIGS
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "GoogleCloudClient":
        """Create a client from the vendor settings."""
        return cls(
            api_key=settings.vendor.api_key,
            translate_url=settings.vendor.translate_url,
            tts_url=settings.vendor.tts_url,
            speech_url=settings.vendor.speech_url,
            timeout=settings.vendor.timeout,
            **kwargs,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._owns_client:
            await self._client.aclose()

    def _require_key(self) -> None:
        if not self.api_key:
            raise CredentialMissingError()

    async def _post(self, endpoint: str, url: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """POST a JSON body with the API key and return the decoded response."""
        self._require_key()
        monitoring.vendor_requests.labels(endpoint).inc()
        try:
            response = await self._client.post(url, params={"key": self.api_key}, json=body)
        except httpx.HTTPError as e:
            monitoring.vendor_errors.labels(endpoint, "transport").inc()
            raise VendorError(f"Google Cloud {endpoint} request failed: {e}") from e

        if response.is_error:
            monitoring.vendor_errors.labels(endpoint, "status").inc()
            raise VendorError(
                f"Google Cloud {endpoint} API error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            monitoring.vendor_errors.labels(endpoint, "payload").inc()
            raise VendorError(f"Google Cloud {endpoint} API returned invalid JSON") from e
        if not isinstance(payload, dict):
            monitoring.vendor_errors.labels(endpoint, "payload").inc()
            raise VendorError(f"Google Cloud {endpoint} API returned an unexpected payload")
        return payload

    async def translate_text(self, text: str, from_lang: str, to_lang: str) -> str:
        """Translate text; languages may be given by name or code."""
        body = {
            "q": text,
            "source": get_language_code(from_lang),
            "target": get_language_code(to_lang),
            "format": "text",
        }
        result = await self._post("translate", self.translate_url, body)
        translations = (result.get("data") or {}).get("translations") or [{}]
        return translations[0].get("translatedText") or ""

    async def synthesize(self, text: str, language: Optional[str] = None) -> bytes:
        """Synthesize MP3 audio for text."""
        body = {
            "input": {"text": text},
            "voice": {
                "languageCode": get_locale(language),
                "name": get_voice_name(language),
            },
            "audioConfig": {"audioEncoding": "MP3"},
        }
        result = await self._post("tts", self.tts_url, body)
        audio_content = result.get("audioContent") or ""
        try:
            return base64.b64decode(audio_content)
        except (binascii.Error, ValueError) as e:
            raise VendorError("Google Cloud tts API returned invalid audio content") from e

    async def recognize(self, audio: bytes, language: Optional[str] = None) -> str:
        """Transcribe audio, trying each recognition config in turn."""
        self._require_key()
        audio_content = base64.b64encode(audio).decode("ascii")
        language_code = get_locale(language)

        for i, base_config in enumerate(self.recognition_configs, start=1):
            config = {**base_config, "languageCode": language_code}
            logger.debug(
                f"Trying speech config {i}/{len(self.recognition_configs)}: {config} "
                f"(audio content length: {len(audio_content)})"
            )
            try:
                result = await self._post(
                    "speech",
                    self.speech_url,
                    {"config": config, "audio": {"content": audio_content}},
                )
            except VendorError as e:
                logger.warning(f"Config {i} failed: {config}, error: {e}")
                continue

            results = result.get("results") or [{}]
            alternatives = results[0].get("alternatives") or [{}]
            transcript = alternatives[0].get("transcript") or ""
            if transcript:
                logger.info(f"Speech recognition successful with config: {config}")
                return transcript
            logger.warning(f"Config {i} returned no transcript: {config}")

        raise VendorError(
            "All speech recognition configurations failed. Please check your audio format and API key."
        )

    async def translate(self, text: str, from_lang: str, to_lang: str) -> str:
        """Translate text, returning a failure message instead of raising."""
        try:
            return await self.translate_text(text, from_lang, to_lang)
        except (CredentialMissingError, VendorError) as e:
            logger.error(f"Translation error: {e}")
            return TRANSLATION_FAILED

    async def synthesize_speech(self, text: str, language: Optional[str] = None) -> Optional[bytes]:
        """Synthesize speech, returning None on any failure."""
        try:
            return await self.synthesize(text, language) or None
        except (CredentialMissingError, VendorError) as e:
            logger.error(f"Text-to-speech error: {e}")
            return None

    async def transcribe(self, audio: bytes, language: Optional[str] = None) -> str:
        """Transcribe audio, returning a failure message instead of raising."""
        try:
            return await self.recognize(audio, language)
        except (CredentialMissingError, VendorError) as e:
            logger.error(f"Speech-to-text error: {e}")
            return RECOGNITION_FAILED
