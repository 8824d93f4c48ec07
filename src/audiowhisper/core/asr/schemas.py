"""Typed request/response bodies for the cloud transcription APIs."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class WhisperResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: str


class GeminiFile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    uri: str
    name: str


class GeminiFileResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    file: GeminiFile


class GeminiInlineData(BaseModel):
    mime_type: str
    data: str  # base64


class GeminiFileData(BaseModel):
    mime_type: str
    file_uri: str


class GeminiRequestPart(BaseModel):
    inline_data: Optional[GeminiInlineData] = None
    file_data: Optional[GeminiFileData] = None
    text: Optional[str] = None


class GeminiRequestContent(BaseModel):
    parts: List[GeminiRequestPart]


class GeminiRequest(BaseModel):
    contents: List[GeminiRequestContent]

    @classmethod
    def for_audio(cls, audio_part: GeminiRequestPart, instruction: str) -> "GeminiRequest":
        return cls(
            contents=[
                GeminiRequestContent(
                    parts=[audio_part, GeminiRequestPart(text=instruction)]
                )
            ]
        )

    def to_payload(self) -> dict:
        return self.model_dump(exclude_none=True)


class GeminiResponsePart(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: Optional[str] = None


class GeminiResponseContent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    parts: List[GeminiResponsePart] = []


class GeminiCandidate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    content: GeminiResponseContent


class GeminiResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    candidates: List[GeminiCandidate] = []

    def first_text(self) -> Optional[str]:
        if not self.candidates or not self.candidates[0].content.parts:
            return None
        return self.candidates[0].content.parts[0].text
