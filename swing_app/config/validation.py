"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any, Sequence


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_indicator_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate indicator periods."""
        errors = []

        for name, value in params.items():
            if name == "bollinger_std" or name == "squeeze_ratio":
                if not _is_number(value) or value <= 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a positive number",
                        value=value
                    ))
            elif not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                errors.append(ValidationError(
                    field=name,
                    message="Must be a positive integer",
                    value=value
                ))

        # MACD needs a slower slow line
        fast = params.get("macd_fast")
        slow = params.get("macd_slow")
        if isinstance(fast, int) and isinstance(slow, int) and fast >= slow:
            errors.append(ValidationError(
                field="macd_fast",
                message="Must be smaller than macd_slow",
                value=fast
            ))

        return errors

    @staticmethod
    def validate_regression_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate regression projection parameters."""
        errors = []

        for name in ("regression_length", "prediction_bars", "atr_average_window"):
            if name in params:
                value = params[name]
                if not isinstance(value, int) or isinstance(value, bool) or value < 2:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be an integer of at least 2",
                        value=value
                    ))

        if "confidence_level" in params:
            value = params["confidence_level"]
            if not _is_number(value) or value <= 0 or value >= 1:
                errors.append(ValidationError(
                    field="confidence_level",
                    message="Must be a number between 0 and 1",
                    value=value
                ))

        high = params.get("high_vol_threshold")
        low = params.get("low_vol_threshold")
        if _is_number(high) and _is_number(low) and low >= high:
            errors.append(ValidationError(
                field="low_vol_threshold",
                message="Must be smaller than high_vol_threshold",
                value=low
            ))

        for name in ("high_vol_factor", "low_vol_factor"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value <= 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a positive number",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_scoring_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate composite score bounds."""
        errors = []

        if "neutral_margin" in params:
            value = params["neutral_margin"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="neutral_margin",
                    message="Must be a non-negative number",
                    value=value
                ))

        low = params.get("min_score")
        high = params.get("max_score")
        for name, value in (("min_score", low), ("max_score", high)):
            if value is not None and (not _is_number(value) or value < 0 or value > 100):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a number between 0 and 100",
                    value=value
                ))
        if _is_number(low) and _is_number(high) and low > high:
            errors.append(ValidationError(
                field="min_score",
                message="Must not exceed max_score",
                value=low
            ))

        return errors

    @staticmethod
    def validate_trade_setup_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate trade setup parameters."""
        errors = []

        for name in ("atr_multiplier", "risk_reward_minimum", "default_capital"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value <= 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a positive number",
                        value=value
                    ))

        if "structure_buffer_atr" in params:
            value = params["structure_buffer_atr"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="structure_buffer_atr",
                    message="Must be a non-negative number",
                    value=value
                ))

        if "max_risk_percent" in params:
            value = params["max_risk_percent"]
            if not _is_number(value) or value <= 0 or value > 100:
                errors.append(ValidationError(
                    field="max_risk_percent",
                    message="Must be a positive percentage up to 100",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_strategy_profile(
        data: dict[str, Any],
        required_fields: Sequence[str],
        weight_keys: Sequence[str],
    ) -> list[ValidationError]:
        """Validate a strategy profile mapping, including its weight table."""
        errors = []

        missing = [name for name in required_fields if name not in data]
        for name in missing:
            errors.append(ValidationError(
                field=name,
                message="Required field is missing",
                value=None
            ))

        for name in data:
            if name not in required_fields:
                errors.append(ValidationError(
                    field=name,
                    message="Unknown profile field",
                    value=data[name]
                ))

        for name in ("id", "name"):
            if name in data and (not isinstance(data[name], str) or not data[name].strip()):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a non-empty string",
                    value=data[name]
                ))

        for name in ("min_risk_reward", "stop_loss_percent", "target_percent", "max_volatility_percent"):
            if name in data:
                value = data[name]
                if not _is_number(value) or value <= 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a positive number",
                        value=value
                    ))

        if "min_confidence" in data:
            value = data["min_confidence"]
            if not _is_number(value) or value < 0 or value > 100:
                errors.append(ValidationError(
                    field="min_confidence",
                    message="Must be a number between 0 and 100",
                    value=value
                ))

        if "min_indicator_align" in data:
            value = data["min_indicator_align"]
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                errors.append(ValidationError(
                    field="min_indicator_align",
                    message="Must be a non-negative integer",
                    value=value
                ))

        if "indicator_weights" in data:
            weights = data["indicator_weights"]
            if not isinstance(weights, dict):
                errors.append(ValidationError(
                    field="indicator_weights",
                    message="Must be a mapping of source name to weight",
                    value=weights
                ))
            else:
                for key in weight_keys:
                    if key not in weights:
                        errors.append(ValidationError(
                            field=f"indicator_weights.{key}",
                            message="Weight is missing",
                            value=None
                        ))
                for key, value in weights.items():
                    if key not in weight_keys:
                        errors.append(ValidationError(
                            field=f"indicator_weights.{key}",
                            message="Unknown scoring source",
                            value=value
                        ))
                    elif not _is_number(value) or value < 0:
                        errors.append(ValidationError(
                            field=f"indicator_weights.{key}",
                            message="Must be a non-negative number",
                            value=value
                        ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "indicators" in config:
            errors.extend(ConfigValidator.validate_indicator_params(config["indicators"]))

        if "regression" in config:
            errors.extend(ConfigValidator.validate_regression_params(config["regression"]))

        if "scoring" in config:
            errors.extend(ConfigValidator.validate_scoring_params(config["scoring"]))

        if "trade_setup" in config:
            errors.extend(ConfigValidator.validate_trade_setup_params(config["trade_setup"]))

        return errors
