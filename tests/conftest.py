"""Shared fixtures: a small OpenAPI document shaped like the X API v2 spec."""

from __future__ import annotations

import json
import random
from pathlib import Path
from typing import Any

import pytest


def make_spec() -> dict[str, Any]:
    return {
        "openapi": "3.0.0",
        "info": {"title": "Test API", "version": "2.99"},
        "paths": {
            "/2/users/me": {
                "get": {
                    "operationId": "getUsersMe",
                    "responses": {
                        "200": {
                            "description": "OK",
                            "content": {
                                "application/json": {
                                    "schema": {"$ref": "#/components/schemas/Get2UsersMeResponse"},
                                }
                            },
                        }
                    },
                }
            },
            "/2/users/{id}": {
                "get": {
                    "operationId": "findUserById",
                    "parameters": [
                        {"name": "id", "in": "path", "required": True, "schema": {"type": "string"}},
                        {"$ref": "#/components/parameters/UserFieldsParameter"},
                    ],
                    "responses": {
                        "200": {
                            "description": "OK",
                            "content": {
                                "application/json": {
                                    "schema": {"$ref": "#/components/schemas/User"},
                                }
                            },
                        }
                    },
                }
            },
            "/2/tweets": {
                "post": {
                    "operationId": "createTweet",
                    "responses": {
                        "201": {
                            "description": "Created",
                            "content": {
                                "application/json": {
                                    "schema": {
                                        "type": "object",
                                        "properties": {
                                            "data": {
                                                "type": "object",
                                                "properties": {
                                                    "id": {"type": "string"},
                                                    "text": {"type": "string"},
                                                },
                                                "required": ["id", "text"],
                                            }
                                        },
                                    }
                                }
                            },
                        }
                    },
                }
            },
            "/2/tweets/{id}": {
                "delete": {
                    "operationId": "deleteTweetById",
                    "responses": {
                        "default": {
                            "description": "Problem",
                            "content": {
                                "application/json": {
                                    "schema": {"$ref": "#/components/schemas/Problem"},
                                }
                            },
                        }
                    },
                }
            },
            "/2/tweets/search/stream": {
                "get": {
                    "operationId": "searchStream",
                    "responses": {
                        "200": {
                            "description": "Stream",
                            "content": {
                                "text/event-stream": {"schema": {"type": "string"}},
                            },
                        }
                    },
                }
            },
            "/2/compliance/jobs": {
                "get": {
                    "operationId": "listBatchComplianceJobs",
                    "responses": {
                        "200": {
                            "description": "OK",
                            "content": {
                                "application/json": {
                                    "schema": {
                                        "type": "array",
                                        "items": {"$ref": "#/components/schemas/ComplianceJob"},
                                    }
                                }
                            },
                        }
                    },
                }
            },
        },
        "components": {
            "schemas": {
                "User": {
                    "type": "object",
                    "required": ["id", "name", "username"],
                    "properties": {
                        "id": {"type": "string"},
                        "name": {"type": "string"},
                        "username": {"type": "string"},
                        "created_at": {"type": "string", "format": "date-time"},
                        "protected": {"type": "boolean"},
                        "public_metrics": {
                            "type": "object",
                            "properties": {
                                "followers_count": {"type": "integer"},
                                "following_count": {"type": "integer"},
                            },
                        },
                    },
                },
                "Get2UsersMeResponse": {
                    "type": "object",
                    "properties": {
                        "data": {"$ref": "#/components/schemas/User"},
                        "errors": {
                            "type": "array",
                            "minItems": 1,
                            "items": {"$ref": "#/components/schemas/Problem"},
                        },
                    },
                },
                "Problem": {
                    "type": "object",
                    "required": ["type", "title"],
                    "properties": {
                        "type": {"type": "string"},
                        "title": {"type": "string"},
                        "detail": {"type": "string"},
                        "status": {"type": "integer"},
                    },
                },
                "ComplianceJob": {
                    "allOf": [
                        {"type": "object", "properties": {"id": {"type": "string"}}},
                        {
                            "type": "object",
                            "properties": {
                                "status": {
                                    "type": "string",
                                    "enum": ["created", "in_progress", "complete"],
                                },
                                "upload_url": {"type": "string", "format": "uri"},
                            },
                        },
                    ]
                },
                "Node": {
                    "type": "object",
                    "properties": {
                        "name": {"type": "string"},
                        "child": {"$ref": "#/components/schemas/Node"},
                    },
                },
            },
            "parameters": {
                "UserFieldsParameter": {
                    "name": "user.fields",
                    "in": "query",
                    "required": False,
                    "schema": {"type": "array", "items": {"type": "string"}},
                },
            },
        },
    }


@pytest.fixture
def spec() -> dict[str, Any]:
    return make_spec()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def spec_file(tmp_path: Path) -> Path:
    path = tmp_path / "openapi.json"
    path.write_text(json.dumps(make_spec()), encoding="utf-8")
    return path
