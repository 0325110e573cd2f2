"""Reusable test helpers for auth headers and status-transition endpoints.

Patterns unified:
 - Auth header creation using direct JWT claims (when bypassing /login) or a real login.
 - Creation + transition sequencing with assertion helpers.
"""
from __future__ import annotations
from typing import Dict
from flask_jwt_extended import create_access_token

# ---------- Generic Auth Helpers ---------- #

def jwt_headers(role: str, user_id: str = 'test-user', name: str = 'Tester', **links):
    """Must run inside an app context. `links` sets portal back-references (trustee_id=...)."""
    claims = {'name': name, 'role': role, 'email': '', 'avatar': ''}
    claims.update(links)
    token = create_access_token(identity=str(user_id), additional_claims=claims)
    return {'Authorization': f'Bearer {token}'}


def login(client, identifier: str, password: str):
    resp = client.post('/iam/auth/login', json={'identifier': identifier, 'password': password})
    assert resp.status_code == 200, resp.get_json()
    body = resp.get_json()
    return {'Authorization': f"Bearer {body['access_token']}"}, body

# ---------- Assertion Helpers ---------- #

def assert_transition(client, url: str, headers: Dict[str, str], expected_status: int, expected_body_key: str = 'status', expected_body_value: str = None):
    resp = client.post(url, headers=headers)
    assert resp.status_code == expected_status, resp.get_json()
    if expected_status < 400 and expected_body_value is not None:
        body = resp.get_json()
        assert body[expected_body_key] == expected_body_value
    return resp


def create_resource_and_assert(client, url: str, payload: dict, headers: Dict[str, str], expected_status_field: str = 'status', expected_initial_status: str = None):
    resp = client.post(url, json=payload, headers=headers)
    assert resp.status_code == 201, resp.get_json()
    body = resp.get_json()
    if expected_initial_status:
        assert body[expected_status_field] == expected_initial_status
    return body

__all__ = ['jwt_headers', 'login', 'assert_transition', 'create_resource_and_assert']
