import os

from hypothesis import settings


if "CI" in os.environ:
    # CI can be slow, so be patient
    # Also we can run more tests there
    settings.register_profile(
        "ci",
        deadline=settings.default.deadline * 10,
        max_examples=settings.default.max_examples * 5)
    settings.load_profile("ci")

settings.register_profile("dev", max_examples=20)
if os.environ.get("TAGCODEC_HYPOTHESIS_PROFILE") == "dev":
    settings.load_profile("dev")
