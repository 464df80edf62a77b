"""GeminiHealthAnalyzer - Children's Daily Health Analysis

Sends a child's meals, exercise and sleep for the day to Gemini 2.5 Pro and
turns the reply into a fixed-shape HealthAnalysisResult.

Design Decisions:
    1. Low temperature (0.3): advice should be conservative and repeatable.
    2. Parse chain: strict JSON first, "N分" score scraping only when JSON fails,
       then per-field defaults. The caller always gets every field.
    3. No retries: a failed call surfaces as ServiceUnavailable.
"""
from typing import Any, Dict, Mapping, Union
import logging

from config.llm import get_gemini_model
from config.settings import HEALTH_MODEL_NAME, REQUEST_TIMEOUT_SECONDS
from core.exceptions import ServiceUnavailable
from core.observability import trace_service
from models.common import ValidationResult
from models.health import (
    ChildHealthData,
    HealthAnalysisResult,
    NutritionAnalysis,
    ExerciseAnalysis,
    SleepAnalysis,
)
from tools.response_parser import extract_response_text, parse_json_payload, parse_text_analysis

logger = logging.getLogger(__name__)

GENERATION_CONFIG = {
    "temperature": 0.3,
    "top_p": 0.8,
    "top_k": 40,
    "max_output_tokens": 4096,
}

DEFAULT_SCORE = 7
DEFAULT_CHILD_AGE = 8
NOT_RECORDED = "未记录"


def _section(parsed: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = parsed.get(key)
    return value if isinstance(value, dict) else {}


class GeminiHealthAnalyzer:
    """
    Health analysis for children backed by Gemini.

    The model is created once per analyzer; without an API key it is None and
    every analysis fails with ServiceUnavailable.
    """

    def __init__(self, model_name: str = HEALTH_MODEL_NAME):
        self.model_name = model_name
        self.model = get_gemini_model(model_name, generation_config=GENERATION_CONFIG)

    @trace_service
    async def analyze_child_health(
        self, health_data: Union[ChildHealthData, Mapping[str, Any]]
    ) -> HealthAnalysisResult:
        if not isinstance(health_data, ChildHealthData):
            health_data = ChildHealthData.from_dict(health_data)

        try:
            if self.model is None:
                raise RuntimeError("GEMINI_API_KEY not configured")

            prompt = self._build_prompt(health_data)
            logger.info(f"Calling {self.model_name} for health analysis...")

            response = await self.model.generate_content_async(
                prompt,
                request_options={"timeout": REQUEST_TIMEOUT_SECONDS},
            )
            analysis_text = extract_response_text(response)
            result = self._structure_result(analysis_text)
            logger.info(f"Health analysis complete (overall score {result.overall_score})")
            return result

        except Exception as e:
            logger.error(f"Gemini health analysis failed: {e}", exc_info=True)
            raise ServiceUnavailable(f"健康分析服务暂时不可用: {e}") from e

    def _build_prompt(self, health_data: ChildHealthData) -> str:
        meals = health_data.meals
        exercise = health_data.exercise
        sleep = health_data.sleep
        age = health_data.child_age or DEFAULT_CHILD_AGE
        weight = f"{health_data.child_weight}kg" if health_data.child_weight else "未提供"
        special_needs = ", ".join(health_data.special_needs) if health_data.special_needs else "无"

        def meal_line(meal) -> str:
            return f"{meal.description or NOT_RECORDED}{' (含图片)' if meal.has_image else ''}"

        return f"""
作为一位专业的儿童健康顾问和营养师，请对以下儿童健康数据进行深度专业分析：

【儿童基本信息】
年龄：{age}岁
体重：{weight}
特殊需求：{special_needs}

【今日健康数据】
🍽️ 饮食记录：
• 早餐：{meal_line(meals.breakfast)}
• 午餐：{meal_line(meals.lunch)}
• 晚餐：{meal_line(meals.dinner)}

🏃‍♂️ 运动情况：
• 运动类型：{exercise.type or NOT_RECORDED}
• 运动时长：{exercise.duration or NOT_RECORDED}
• 运动描述：{exercise.description or NOT_RECORDED}

😴 睡眠状况：
• 入睡时间：{sleep.start_time or NOT_RECORDED}
• 起床时间：{sleep.end_time or NOT_RECORDED}
• 总睡眠时长：{sleep.total_hours or NOT_RECORDED}小时

【专业分析要求】
请从以下维度进行系统分析，并以JSON格式返回结构化结果：

1. 营养评估 (1-10分)：
   - 三大营养素（蛋白质、碳水、脂肪）配比分析
   - 维生素和矿物质摄入评估
   - 食物多样性和营养密度分析
   - 具体改进建议和推荐食物

2. 运动分析 (1-10分)：
   - 运动强度和时长的年龄适宜性
   - 运动类型的科学性评估
   - 体能发展和健康促进效果
   - 运动安全性和改进建议

3. 睡眠质量评估 (1-10分)：
   - 睡眠时长充足性（{age}岁儿童建议9-11小时）
   - 作息时间规律性分析
   - 睡眠质量影响因素识别
   - 睡眠环境和习惯优化建议

4. 综合健康评分 (1-10分)：
   - 整体健康状况量化评估
   - 生长发育适宜性分析
   - 潜在健康风险识别
   - 家长重点关注事项

5. 个性化建议：
   - 针对当前年龄段的具体指导
   - 家长实施的具体行动计划
   - 短期（1周）和中期（1月）目标设定
   - 需要专业医生介入的情况预警

【JSON字段】
overallScore, nutrition{{score, strengths[], improvements[], recommendations[]}},
exercise{{score, adequacy, suggestions[]}}, sleep{{score, quality, recommendations[]}},
parentGuidance[], emergencyAlerts[], nextStepActions[]

请确保建议科学、实用、温暖，符合中国家庭的实际情况和文化背景。"""

    def _structure_result(self, analysis_text: str) -> HealthAnalysisResult:
        """Turn the model's reply into a result, filling gaps with defaults."""
        try:
            parsed = parse_json_payload(analysis_text)
        except ValueError:
            logger.warning("Health analysis reply is not JSON, scraping scores from text")
            parsed = parse_text_analysis(analysis_text)

        if not isinstance(parsed, dict):
            logger.error(f"Health analysis reply is {type(parsed).__name__}, not an object")
            return self.default_result()
        return self._result_from_payload(parsed)

    def _result_from_payload(self, parsed: Dict[str, Any]) -> HealthAnalysisResult:
        # A malformed section only loses its own fields
        nutrition = _section(parsed, "nutrition")
        exercise = _section(parsed, "exercise")
        sleep = _section(parsed, "sleep")

        return HealthAnalysisResult(
            overall_score=parsed.get("overallScore") or DEFAULT_SCORE,
            nutrition_analysis=NutritionAnalysis(
                score=nutrition.get("score") or DEFAULT_SCORE,
                strengths=nutrition.get("strengths") or ["营养搭配基本合理"],
                improvements=nutrition.get("improvements") or ["增加蔬菜摄入"],
                recommendations=nutrition.get("recommendations") or ["建议多样化饮食"],
            ),
            exercise_analysis=ExerciseAnalysis(
                score=exercise.get("score") or DEFAULT_SCORE,
                adequacy=exercise.get("adequacy") or "运动量适中",
                suggestions=exercise.get("suggestions") or ["保持当前运动习惯"],
            ),
            sleep_analysis=SleepAnalysis(
                score=sleep.get("score") or DEFAULT_SCORE,
                quality=sleep.get("quality") or "睡眠质量良好",
                recommendations=sleep.get("recommendations") or ["保持规律作息"],
            ),
            parent_guidance=parsed.get("parentGuidance") or [
                "继续关注孩子的日常健康状况",
                "鼓励孩子建立健康的生活习惯",
            ],
            emergency_alerts=parsed.get("emergencyAlerts") or [],
            next_step_actions=parsed.get("nextStepActions") or [
                "持续记录健康数据",
                "定期评估改进效果",
            ],
        )

    @staticmethod
    def default_result() -> HealthAnalysisResult:
        return HealthAnalysisResult(
            overall_score=DEFAULT_SCORE,
            nutrition_analysis=NutritionAnalysis(
                score=DEFAULT_SCORE,
                strengths=["基础营养摄入"],
                improvements=["饮食多样化"],
                recommendations=["增加蔬果摄入"],
            ),
            exercise_analysis=ExerciseAnalysis(
                score=DEFAULT_SCORE,
                adequacy="需要更多数据评估",
                suggestions=["保持日常活动"],
            ),
            sleep_analysis=SleepAnalysis(
                score=DEFAULT_SCORE,
                quality="需要更多数据评估",
                recommendations=["保持规律作息"],
            ),
            parent_guidance=["持续关注孩子健康状况"],
            next_step_actions=["完善健康数据记录"],
        )

    def generate_health_summary(self, result: HealthAnalysisResult) -> str:
        """Short emoji summary for parents."""
        nutrition = result.nutrition_analysis
        exercise = result.exercise_analysis
        sleep = result.sleep_analysis

        lines = [f"📊 今日健康评分：{result.overall_score}/10", ""]
        lines.append(f"🍎 营养状况 ({nutrition.score}/10)")
        lines.extend(f"✅ {s}" for s in nutrition.strengths)
        lines.extend(f"🔄 {i}" for i in nutrition.improvements)
        lines.append("")
        lines.append(f"🏃 运动状况 ({exercise.score}/10)")
        lines.append(exercise.adequacy)
        lines.append("")
        lines.append(f"😴 睡眠状况 ({sleep.score}/10)")
        lines.append(sleep.quality)
        lines.append("")
        lines.append("💡 家长指导建议：")
        lines.extend(f"• {g}" for g in result.parent_guidance)
        return "\n".join(lines)


def create_gemini_health_analyzer(model_name: str = HEALTH_MODEL_NAME) -> GeminiHealthAnalyzer:
    return GeminiHealthAnalyzer(model_name)


class HealthDataValidator:
    """Checks a raw health record before it is analyzed."""

    @staticmethod
    def validate_child_health_data(data: Mapping[str, Any]) -> ValidationResult:
        errors = []

        if not data.get("meals"):
            errors.append("缺少饮食数据")
        if not data.get("exercise"):
            errors.append("缺少运动数据")

        sleep = data.get("sleep")
        if not sleep:
            errors.append("缺少睡眠数据")
        else:
            total_hours = sleep.get("total_hours", sleep.get("totalHours"))
            if total_hours and (total_hours < 0 or total_hours > 24):
                errors.append("睡眠时长数据异常")

        return ValidationResult(errors=errors)
