"""Example Schemas

Shows primitives, refinements, modifiers, composites, coercion, env
declarations and procedures together. ``python -m schemata`` runs the
scenarios below through both entry points.
"""
from __future__ import annotations

from datetime import date as Date
from typing import Any, Mapping

from schemata.core.env import Env, create_env
from schemata.core.logging import rpc_logger

from .boundaries import procedure, router
from .coercion import coerce
from .constructors import (
    array,
    boolean,
    date,
    email,
    enum,
    integer,
    literal,
    number,
    object_,
    record,
    string,
    tuple_,
    union,
    unknown,
    url,
    void,
)

# ============================================================================
# User profile: one field per schema feature
# ============================================================================

RoleEnum = enum("admin", "user", "moderator")

UserProfileSchema = object_(
    # Primitives
    name=string(),
    age=number(),
    email=email(),
    is_active=boolean(),
    created_at=date(),
    # String refinements
    username=string().min(3).max(20),
    website=url().optional(),
    # Number refinements
    score=number().min(0).max(100),
    level=integer().positive(),
    # Modifiers
    bio=string().optional(),
    avatar=string().nullable(),
    nickname=string().nullish(),
    theme=string().default("light"),
    # Enum and literal
    role=RoleEnum,
    status=literal("active"),
    # Complex types
    tags=array(string()),
    scores=array(number()).nonempty(),
    activities=array(object_(title=string(), completed=boolean())),
    address=object_(city=string(), country=string(), zip_code=string().optional()),
    contact_method=union(literal("email"), literal("phone"), literal("sms")),
    metadata=record(string(), unknown()),
    coordinates=tuple_(number(), number()),
)

SAMPLE_PROFILE: dict[str, Any] = {
    "name": "John Doe",
    "age": 28,
    "email": "john@example.com",
    "is_active": True,
    "created_at": Date(2025, 1, 1),
    "username": "johndoe",
    "website": "https://johndoe.dev",
    "score": 85,
    "level": 5,
    "avatar": None,
    "nickname": None,
    "role": "admin",
    "status": "active",
    "tags": ["developer", "python", "validation"],
    "scores": [95, 87, 92],
    "activities": [
        {"title": "Complete profile setup", "completed": True},
        {"title": "Upload profile picture", "completed": False},
        {"title": "Verify email address", "completed": True},
    ],
    "address": {"city": "Istanbul", "country": "Turkey"},
    "contact_method": "email",
    "metadata": {"source": "web", "campaign": "summer2024", "referrer": None},
    "coordinates": [41.0082, 28.9784],
}


# ============================================================================
# parse vs safe_parse
# ============================================================================

UserSchema = object_(
    name=string().min(2, "Name must be at least 2 characters"),
    email=email("Invalid email address"),
    age=number().positive("Age must be positive"),
)

SCENARIOS: dict[str, dict[str, Any]] = {
    "valid": {"name": "John", "email": "john@example.com", "age": 25},
    "invalid_email": {"name": "Jane", "email": "invalid-email", "age": 30},
    "missing_name": {"name": "a", "email": "bob@test.com", "age": 40},
}


# ============================================================================
# Registration form
# ============================================================================

UserFormSchema = object_(
    name=string()
        .min(2, "Name must be at least 2 characters")
        .max(50, "Name must be at most 50 characters"),
    email=email("Please enter a valid email address"),
    age=number("Age must be a valid number")
        .int("Age must be a whole number")
        .positive("Age must be positive")
        .min(13, "You must be at least 13 years old")
        .max(120, "Age must be realistic"),
    age_coerce=coerce.number("Age must be a valid number")
        .int("Age must be a whole number")
        .positive("Age must be positive")
        .min(13, "You must be at least 13 years old")
        .max(120, "Age must be realistic"),
    bio=string()
        .max(200, "Bio must be at most 200 characters")
        .optional()
        .or_(literal("")),
)

FORM_DEFAULTS: dict[str, Any] = {"name": "", "email": "", "age": 0, "age_coerce": 0, "bio": ""}


# ============================================================================
# Application environment
# ============================================================================

ENV_SERVER = {
    "DATABASE_URL": url(),
    "BETTER_AUTH_SECRET": string().min(1),
    "BETTER_AUTH_URL": url(),
    "RESEND_API_KEY": string().min(1),
    "NODE_ENV": enum("development", "production").default("development"),
}

ENV_CLIENT = {
    "PUBLIC_APP_URL": url().optional(),
}


def load_app_env(runtime_env: Mapping[str, str] | None = None, env_file: str | None = None) -> Env:
    """Validate the application's variables (see ``create_env``)."""
    return create_env(server=ENV_SERVER, client=ENV_CLIENT, runtime_env=runtime_env, env_file=env_file)


# ============================================================================
# Procedures
# ============================================================================

async def list_posts(data: None) -> None:
    rpc_logger().info("posts_listed", received=data)


get_posts = (
    procedure()
    .route(method="GET", path="/posts", summary="Get all posts", tags=["posts"])
    .input(void())
    .output(void())
    .handler(list_posts)
)

app_router = router({"post": {"get_posts": get_posts}})
