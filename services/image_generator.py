"""ImagenGenerator - Emotional Illustrations for Children

Turns "what I want to tell mum" into an illustration prompt and asks Imagen 3.0
for a picture. Generation never fails outward: when the call errors or returns
no image, a stock picture for the requested style is used instead.
"""
from typing import Any, Dict, List, Mapping
import time
import asyncio
import logging
from datetime import datetime

from config.llm import get_gemini_model
from config.settings import IMAGE_MODEL_NAME, REQUEST_TIMEOUT_SECONDS
from core.observability import trace_service, elapsed_ms, mark_fallback
from models.common import ValidationResult
from models.imaging import (
    ImageStyle,
    EmotionalTone,
    ImageGenerationConfig,
    ImageGenerationResult,
    ImageMetadata,
)
from tools.response_parser import extract_inline_image

logger = logging.getLogger(__name__)

ENGINE_NAME = "Google Imagen 3.0"
RESOLUTION = "1024x1024"

GENERATION_CONFIG = {
    "temperature": 0.7,
    "candidate_count": 1,
    "max_output_tokens": 1024,
}

STYLE_DESCRIPTIONS = {
    ImageStyle.CARTOON: "可爱温馨的卡通插画风格，色彩明亮，线条柔和，适合儿童审美",
    ImageStyle.HANDDRAWN: "温暖自然的手绘插画风格，水彩质感，柔和色调，艺术感强",
    ImageStyle.THREE_D: "现代感十足的3D立体风格，光影丰富，质感细腻，视觉冲击力强",
    ImageStyle.WATERCOLOR: "柔和梦幻的水彩画风格，色彩渐变自然，诗意美感",
    ImageStyle.PIXAR: "电影级别的皮克斯动画风格，角色生动，场景丰富，专业品质",
}

TONE_DESCRIPTIONS = {
    EmotionalTone.HAPPY: "快乐愉悦的氛围，阳光明媚，色彩鲜艳",
    EmotionalTone.SAD: "温柔安慰的氛围，柔和色调，温暖包容",
    EmotionalTone.EXCITED: "兴奋激动的氛围，动感十足，活力四射",
    EmotionalTone.CALM: "平静安详的氛围，色调温和，宁静美好",
    EmotionalTone.LOVING: "充满爱意的氛围，温馨浪漫，情感丰富",
}

_UNSPLASH_QUERY = "?ixlib=rb-1.2.1&auto=format&fit=crop&w=1024&h=1024&q=80"
FALLBACK_IMAGES = {
    ImageStyle.CARTOON: f"https://images.unsplash.com/photo-1566140967404-b8b3932483f5{_UNSPLASH_QUERY}",
    ImageStyle.HANDDRAWN: f"https://images.unsplash.com/photo-1569172122301-bc5008bc09c5{_UNSPLASH_QUERY}",
    ImageStyle.THREE_D: f"https://images.unsplash.com/photo-1535572290543-960a8046f5af{_UNSPLASH_QUERY}",
    ImageStyle.WATERCOLOR: f"https://images.unsplash.com/photo-1579783901586-d88db74b4fe4{_UNSPLASH_QUERY}",
    ImageStyle.PIXAR: f"https://images.unsplash.com/photo-1611457194403-d3aca4cf9d11{_UNSPLASH_QUERY}",
}

MIN_CHILD_AGE = 3
MAX_CHILD_AGE = 18


def get_fallback_image(style: Any) -> str:
    """Stock image for a style; unknown styles get the cartoon picture."""
    try:
        return FALLBACK_IMAGES[ImageStyle(style)]
    except ValueError:
        return FALLBACK_IMAGES[ImageStyle.CARTOON]


class ImagenGenerator:
    """Illustration generator for emotional expression and learning content."""

    def __init__(self, model_name: str = IMAGE_MODEL_NAME):
        self.model_name = model_name
        self.model = get_gemini_model(model_name, generation_config=GENERATION_CONFIG)

    @trace_service
    async def generate_emotional_illustration(self, config: ImageGenerationConfig) -> ImageGenerationResult:
        start = time.perf_counter()
        prompt = self.build_image_prompt(config)

        try:
            if self.model is None:
                raise RuntimeError("GEMINI_API_KEY not configured")

            logger.info(f"Calling {self.model_name} for an illustration...")
            logger.debug(f"Prompt: {prompt[:100]}...")

            response = await self.model.generate_content_async(
                f"生成图像: {prompt}",
                request_options={"timeout": REQUEST_TIMEOUT_SECONDS},
            )

            image_url = extract_inline_image(response)
            if not image_url:
                logger.info("No image in response, using fallback image")
                mark_fallback()
                image_url = get_fallback_image(config.style)

            return self._result(config, prompt, image_url, "high", ENGINE_NAME, start)

        except Exception as e:
            logger.error(f"Imagen generation failed: {e}", exc_info=True)
            mark_fallback()
            return self._result(
                config, prompt, get_fallback_image(config.style), "medium",
                f"{ENGINE_NAME} (Fallback)", start,
            )

    def _result(self, config: ImageGenerationConfig, prompt: str, image_url: str,
                quality: str, engine: str, start: float) -> ImageGenerationResult:
        return ImageGenerationResult(
            image_url=image_url,
            prompt=prompt,
            style=config.style.value,
            quality=quality,
            resolution=RESOLUTION,
            generation_time=elapsed_ms(start),
            metadata=ImageMetadata(
                engine=engine,
                model=self.model_name,
                timestamp=datetime.now().isoformat(),
            ),
        )

    @staticmethod
    def build_image_prompt(config: ImageGenerationConfig) -> str:
        age = config.child_age or 8
        target = config.target
        style_text = STYLE_DESCRIPTIONS[config.style]
        tone_text = TONE_DESCRIPTIONS[config.emotional_tone]
        elements_text = (
            f"，包含以下元素：{'、'.join(config.custom_elements)}" if config.custom_elements else ""
        )

        return f"""
创作一幅{style_text}的插画作品。

主题内容：一个{age}岁的孩子想对{target}表达"{config.message}"的真挚情感。

情感氛围：{tone_text}。

画面要求：
- 以孩子的视角展现对{target}的情感表达
- 画面温馨治愈，充满童真和爱意
- 构图和谐，色彩搭配温暖舒适
- 符合{age}岁儿童的心理特点和表达方式
- 1024x1024高分辨率，专业品质
{elements_text}

艺术风格：{style_text}
情感基调：{tone_text}

请创作一幅能够准确传达孩子内心情感，让{target}感受到温暖和爱意的高质量插画作品。
""".strip()

    async def generate_multi_style_images(
        self, target: str, message: str, styles: List[ImageStyle]
    ) -> List[ImageGenerationResult]:
        """One loving-tone illustration per style, all or nothing."""
        tasks = [
            self.generate_emotional_illustration(
                ImageGenerationConfig(
                    target=target,
                    message=message,
                    style=style,
                    emotional_tone=EmotionalTone.LOVING,
                )
            )
            for style in styles
        ]

        try:
            results = await asyncio.gather(*tasks)
        except Exception as e:
            logger.error(f"Batch illustration generation failed: {e}")
            raise
        logger.info(f"Generated {len(results)} illustrations in different styles")
        return list(results)

    async def generate_educational_illustration(
        self, topic: str, age_group: int, style: ImageStyle = ImageStyle.CARTOON
    ) -> ImageGenerationResult:
        config = ImageGenerationConfig(
            target="学习",
            message=f"学习{topic}的有趣内容",
            style=style,
            emotional_tone=EmotionalTone.EXCITED,
            child_age=age_group,
            custom_elements=["教育元素", "互动场景", "学习工具"],
        )
        return await self.generate_emotional_illustration(config)

    @staticmethod
    def validate_config(config: Mapping[str, Any]) -> ValidationResult:
        """Check a raw illustration request before building an ImageGenerationConfig."""
        errors = []

        if not str(config.get("target") or "").strip():
            errors.append("诉说对象不能为空")
        if not str(config.get("message") or "").strip():
            errors.append("表达内容不能为空")
        style = config.get("style")
        if isinstance(style, ImageStyle):
            style = style.value
        if style not in {s.value for s in ImageStyle}:
            errors.append("不支持的图像风格")

        age = config.get("child_age", config.get("childAge"))
        if age and (age < MIN_CHILD_AGE or age > MAX_CHILD_AGE):
            errors.append(f"儿童年龄范围应在{MIN_CHILD_AGE}-{MAX_CHILD_AGE}岁之间")

        return ValidationResult(errors=errors)


def create_imagen_generator(model_name: str = IMAGE_MODEL_NAME) -> ImagenGenerator:
    return ImagenGenerator(model_name)


class ImageStyleUtils:
    """Style catalogue for pickers in the app."""

    STYLE_CATALOGUE = [
        {"key": ImageStyle.CARTOON.value, "name": "卡通风格", "description": "适合儿童的可爱卡通形象"},
        {"key": ImageStyle.HANDDRAWN.value, "name": "手绘质感", "description": "温暖自然的手绘插画效果"},
        {"key": ImageStyle.THREE_D.value, "name": "3D立体", "description": "现代感十足的三维视觉效果"},
        {"key": ImageStyle.WATERCOLOR.value, "name": "水彩艺术", "description": "柔和梦幻的水彩画风格"},
        {"key": ImageStyle.PIXAR.value, "name": "皮克斯风格", "description": "电影级别的角色设计和场景渲染"},
    ]

    @classmethod
    def get_available_styles(cls) -> List[Dict[str, str]]:
        return [dict(style) for style in cls.STYLE_CATALOGUE]

    @staticmethod
    def recommend_style_by_age(age: int) -> ImageStyle:
        if age <= 6:
            return ImageStyle.CARTOON
        if age <= 10:
            return ImageStyle.HANDDRAWN
        if age <= 14:
            return ImageStyle.THREE_D
        return ImageStyle.PIXAR
