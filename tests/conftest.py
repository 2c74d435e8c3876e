import os

from hypothesis import HealthCheck, settings

# Deadlines are flaky on shared CI runners; example counts stay at the default.
settings.register_profile(
    "ci", deadline=None, suppress_health_check=[HealthCheck.too_slow]
)
settings.register_profile("dev", deadline=None, max_examples=50)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))
