"""
Pytest configuration and fixtures for the orphaned code detector tests.

Provides factories for code items and a small multi-language repository
laid out on disk.
"""

from pathlib import Path
from typing import Any, Callable

import pytest

from ocd.core.models import CodeEndpoint, CodeFunction, EndpointUsage

EXPRESS_APP = """\
const express = require('express');
const app = express();

function getUser(req, res) {
  res.json({ id: req.params.id });
}

const listOrders = (req, res) => {
  res.json([]);
};

function unusedHelper() {
  return 42;
}

export function publicHelper() {
  return 1;
}

app.get('/users/:id', getUser);
app.get('/orders', auth, listOrders);
app.delete('/legacy/:id', removeLegacy);
app.post('/inline', (req, res) => res.send('ok'));
"""

FLASK_APP = """\
from flask import Flask

app = Flask(__name__)

@app.route('/health')
def health():
    return 'ok'

@app.route('/items', methods=['POST'])
def create_item():
    return 'created'
"""

SPRING_CONTROLLER = """\
@RestController
public class UserController {
    @GetMapping("/api/users/{id}")
    public User getUser(@PathVariable Long id) {
        return service.find(id);
    }
}
"""


@pytest.fixture
def make_endpoint() -> Callable[..., CodeEndpoint]:
    def _make(**overrides: Any) -> CodeEndpoint:
        fields: dict[str, Any] = {
            "language": "javascript",
            "file": "/repo/src/app.js",
            "start_line": 1,
            "end_line": 1,
            "snippet": "app.get('/users/:id', getUser)",
            "method": "GET",
            "route": "/users/:id",
            "handler_name": "getUser",
            "framework_hint": "express",
            "confidence": 0.95,
        }
        fields.update(overrides)
        return CodeEndpoint(**fields)

    return _make


@pytest.fixture
def make_function() -> Callable[..., CodeFunction]:
    def _make(**overrides: Any) -> CodeFunction:
        fields: dict[str, Any] = {
            "language": "javascript",
            "file": "/repo/src/app.js",
            "start_line": 3,
            "end_line": 3,
            "snippet": "function helper() {",
            "function_name": "helper",
            "is_exported": False,
            "references": (),
            "confidence": 0.9,
        }
        fields.update(overrides)
        return CodeFunction(**fields)

    return _make


@pytest.fixture
def make_usage() -> Callable[..., EndpointUsage]:
    def _make(**overrides: Any) -> EndpointUsage:
        fields: dict[str, Any] = {
            "endpoint": "/users/:id",
            "method": "GET",
            "hitCount": 10,
            "lastAccessed": "2024-05-01T12:00:00+00:00",
            "avgResponseTime": 12.5,
        }
        fields.update(overrides)
        return EndpointUsage.model_validate(fields)

    return _make


@pytest.fixture
def sample_repo(tmp_path: Path) -> Path:
    """A small repository with express, flask and spring sources plus noise."""
    files = {
        "src/app.js": EXPRESS_APP,
        "api/views.py": FLASK_APP,
        "java/UserController.java": SPRING_CONTROLLER,
        "README.md": "app.get('/docs', docs)\n",
        "node_modules/lib/index.js": "app.get('/vendored', vendored);\n",
        ".hidden/secret.js": "app.get('/hidden', hidden);\n",
    }
    for relative, content in files.items():
        file_path = tmp_path / relative
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
    return tmp_path
