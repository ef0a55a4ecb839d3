"""User-facing strings (Traditional Chinese)."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from breedlens.notifications import Notification, Severity

MODEL_LOADED = Notification(
    title="模型已加載",
    body="狗品種識別模型已成功加載。",
    severity=Severity.SUCCESS,
)

MODEL_LOAD_FAILED = Notification(
    title="模型加載失敗",
    body="無法加載狗品種識別模型。請檢查您的網絡連接並刷新頁面。",
    severity=Severity.DESTRUCTIVE,
)

CAMERA_NOT_IMPLEMENTED = Notification(
    title="功能未實現",
    body="相機捕獲功能尚未實現。",
    severity=Severity.INFO,
)

PREDICTION_FAILED = Notification(
    title="預測失敗",
    body="無法識別狗品種。請嘗試上傳另一張圖片。",
    severity=Severity.DESTRUCTIVE,
)


def format_confidence(probability: float) -> str:
    """Render a probability as a percentage with two decimals, e.g. ``87.34%``.

    Ties round up, so 0.90625 renders as ``90.63%``.
    """
    percent = Decimal(probability * 100).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{percent}%"


def format_prediction(display_label: str, probability: float) -> str:
    return f"預測的狗品種: {display_label} (可信度: {format_confidence(probability)})"
