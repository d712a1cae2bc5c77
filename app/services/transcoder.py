# app/services/transcoder.py
"""
이미지 트랜스코딩 (업로드 전 리사이즈 + JPEG 재인코딩)

transcode(bytes, constraints) -> bytes 형태로 통일해서
브라우저 canvas 대신 서버/클라이언트 어디서든 같은 방식으로 사용.
"""
from dataclasses import dataclass
from io import BytesIO
from typing import Protocol

from PIL import Image, ImageOps, UnidentifiedImageError

JPEG_CONTENT_TYPE = "image/jpeg"


class TranscodeError(Exception):
    """트랜스코딩 실패"""

class DecodeError(TranscodeError):
    """원본을 이미지로 읽을 수 없음"""

class EncodeError(TranscodeError):
    """재인코딩 결과가 비어있음"""


@dataclass(frozen=True)
class TranscodeConstraints:
    """리사이즈/압축 조건"""
    max_width: int = 1920
    max_height: int = 1920
    quality: float = 0.7  # 0 ~ 1

    def __post_init__(self):
        if self.max_width < 1 or self.max_height < 1:
            raise ValueError("max_width/max_height must be positive")
        if not 0 <= self.quality <= 1:
            raise ValueError("quality must be between 0 and 1")

    @property
    def jpeg_quality(self) -> int:
        # Pillow JPEG quality는 1~95 권장
        return int(max(1, min(95, round(self.quality * 100))))


class Transcoder(Protocol):
    def transcode(self, data: bytes, constraints: TranscodeConstraints) -> bytes: ...


def fit_within(width: int, height: int, max_width: int, max_height: int) -> tuple[int, int]:
    """비율 유지하면서 최대 크기 안으로 축소 (확대는 안 함)"""
    if width <= max_width and height <= max_height:
        return width, height
    
    scale = min(max_width / width, max_height / height)
    return max(1, round(width * scale)), max(1, round(height * scale))


def _flatten(img: Image.Image) -> Image.Image:
    """JPEG은 알파 채널이 없으므로 흰 배경에 합성"""
    if img.mode == "P":
        img = img.convert("RGBA" if "transparency" in img.info else "RGB")
    if img.mode in ("RGBA", "LA"):
        background = Image.new("RGB", img.size, (255, 255, 255))
        background.paste(img, mask=img.getchannel("A"))
        return background
    if img.mode not in ("RGB", "L"):
        return img.convert("RGB")
    return img


class PillowTranscoder:
    """Pillow 기반 트랜스코더"""

    def transcode(self, data: bytes, constraints: TranscodeConstraints) -> bytes:
        if not data:
            raise DecodeError("Failed to load image: empty file")
        
        # 1. 디코드
        try:
            img = Image.open(BytesIO(data))
            img.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            raise DecodeError(f"Failed to load image: {e}") from e
        
        # 2. 회전 정보 반영 + 리사이즈
        img = ImageOps.exif_transpose(img)
        width, height = fit_within(img.width, img.height, constraints.max_width, constraints.max_height)
        if (width, height) != img.size:
            img = img.resize((width, height), Image.Resampling.LANCZOS)
        
        # 3. JPEG 재인코딩
        output = BytesIO()
        try:
            _flatten(img).save(
                output,
                format="JPEG",
                quality=constraints.jpeg_quality,
                optimize=True,
                progressive=True,
            )
        except (OSError, ValueError) as e:
            raise EncodeError(f"Failed to compress image: {e}") from e
        
        result = output.getvalue()
        if not result:
            raise EncodeError("Failed to compress image")
        return result
