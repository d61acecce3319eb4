#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import Optional

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from swing_app.config.loader import ConfigLoader
from swing_app.config.validation import ConfigValidator
from swing_app.errors import ConfigInvalidError


def main(config_dir: Optional[str] = None):
    """Main validation function."""
    print("🔍 Validating swing_app configuration...")

    loader = ConfigLoader.create(Path(config_dir) if config_dir else None)
    print(f"📁 Config directory: {loader.config_dir}")

    all_valid = True

    # Engine parameters
    print("\n⚙️  Validating engine parameters...")
    errors = ConfigValidator.validate_config(loader.merge_config())
    if errors:
        print(f"❌ Found {len(errors)} validation errors:")
        for error in errors:
            print(f"  • {error.field}: {error.message} (value: {error.value})")
        all_valid = False
    else:
        try:
            config = loader.build_config()
            print(f"✅ Engine parameters are valid (min_bars={config.analysis.min_bars}, "
                  f"risk={config.trade_setup.max_risk_percent}%)")
        except ConfigInvalidError as e:
            print(f"❌ {e}")
            all_valid = False

    # Strategy profiles
    print("\n📋 Validating strategy profiles...")
    try:
        registry = loader.load_registry()
    except ConfigInvalidError as e:
        print(f"❌ {e}")
        all_valid = False
    else:
        for profile in registry:
            print(f"✅ {profile.id}: min confidence {profile.min_confidence:.0f}%, "
                  f"min R:R {profile.min_risk_reward}, align ≥ {profile.min_indicator_align}, "
                  f"ATR ≤ {profile.max_volatility_percent}%")
        if registry.fallback_id:
            print(f"↪️  Unknown strategy ids fall back to '{registry.fallback_id}'")

    # Per-call overrides
    print("\n🧪 Testing per-call overrides...")
    try:
        loader.build_config({"trade_setup": {"max_risk_percent": 1.0}})
        print("✅ Override validation passed")
    except ConfigInvalidError as e:
        print(f"❌ Override validation failed: {e}")
        all_valid = False

    if all_valid:
        print("\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print("\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else None)
