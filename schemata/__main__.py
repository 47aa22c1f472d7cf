"""Demo runner: ``python -m schemata``.

Runs the example schemas through both entry points and logs the outcome.
"""
import asyncio

from schemata.core.config import settings
from schemata.core.logging import configure_logging, get_logger
from schemata.core.validation import FormValidator, ValidationError, parse, safe_parse
from schemata.core.validation.examples import (
    FORM_DEFAULTS,
    SAMPLE_PROFILE,
    SCENARIOS,
    UserFormSchema,
    UserProfileSchema,
    UserSchema,
    app_router,
)

# Initialize logging before anything else
configure_logging(level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)

log = get_logger("schemata.demo")


def run_profile() -> None:
    profile = parse(UserProfileSchema, SAMPLE_PROFILE)
    log.info("profile_parsed", fields=sorted(profile), theme=profile["theme"])


def run_scenarios() -> None:
    for name, data in SCENARIOS.items():
        try:
            user = parse(UserSchema, data)
            log.info("parse_succeeded", scenario=name, user=user)
        except ValidationError as e:
            log.warning("parse_raised", scenario=name, field_errors=e.flatten())

        result = safe_parse(UserSchema, data)
        if result.success:
            log.info("safe_parse_succeeded", scenario=name)
        else:
            log.warning("safe_parse_failed", scenario=name, field_errors=result.flatten())


def run_form() -> None:
    form = FormValidator(UserFormSchema, FORM_DEFAULTS)
    state = form.validate({"name": "Ada", "email": "ada@example.com", "age": 36, "age_coerce": "36"})
    log.info("form_validated", is_valid=state.is_valid, field_errors=dict(state.field_errors))

    state = form.validate()
    log.info("form_defaults_validated", is_valid=state.is_valid, field_errors=dict(state.field_errors))


async def run_procedures() -> None:
    for name in app_router:
        result = await app_router.safe_call(name)
        log.info("procedure_called", procedure=name, ok=result.is_ok())


def main() -> None:
    log.info("startup", message="schemata demo starting")
    run_profile()
    run_scenarios()
    run_form()
    asyncio.run(run_procedures())
    log.info("shutdown", message="schemata demo finished")


if __name__ == "__main__":
    main()
