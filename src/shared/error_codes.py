# src/shared/error_codes.py
# Central mapping that aligns with the error contract.
# Keep keys stable; API clients rely on these.
ERROR_CODES = {
    # ─── Validation & Requests ──────────────────────────────────────────────
    "validation_error": {
        "http": 422,
        "message": "Validation failed for one or more fields."
    },
    "invalid_request": {
        "http": 422,
        "message": "Invalid request payload."
    },
    "invalid_domain": {
        "http": 422,
        "message": "Domain is not a valid hostname."
    },
    "duplicate_domain": {
        "http": 422,
        "message": "A mapping for this domain already exists."
    },
    "invalid_permission": {
        "http": 422,
        "message": "Permission must be written as 'resource:action'."
    },
    "role_not_assignable": {
        "http": 422,
        "message": "Role template cannot be assigned to this kind of principal."
    },

    # ─── Auth ───────────────────────────────────────────────────────────────
    "unauthorized": {
        "http": 401,
        "message": "Acting user id is missing."
    },
    "forbidden": {
        "http": 403,
        "message": "You are not allowed to perform this action."
    },

    # ─── Not found ──────────────────────────────────────────────────────────
    "not_found": {
        "http": 404,
        "message": "Resource not found."
    },
    "account_not_found": {
        "http": 404,
        "message": "Account not found."
    },
    "role_not_found": {
        "http": 404,
        "message": "Role template not found."
    },
    "assignment_not_found": {
        "http": 404,
        "message": "Role assignment not found."
    },
    "domain_mapping_not_found": {
        "http": 404,
        "message": "Domain mapping not found."
    },

    # ─── Hierarchy rules ────────────────────────────────────────────────────
    "rule_violation": {
        "http": 409,
        "message": "The change violates an account hierarchy rule."
    },
    "self_parent": {
        "http": 409,
        "message": "Account cannot be its own parent."
    },
    "cycle": {
        "http": 409,
        "message": "This would create a circular reference in the account hierarchy."
    },
    "subsidiary_requires_parent": {
        "http": 409,
        "message": "Subsidiary accounts must have a parent account."
    },
    "incompatible_parent_type": {
        "http": 409,
        "message": "Subsidiary accounts cannot have Individual accounts as parents."
    },
    "incompatible_child_type": {
        "http": 409,
        "message": "Individual accounts cannot have Organization or Subsidiary child accounts."
    },
    "last_super_admin": {
        "http": 409,
        "message": "The last super admin role assignment cannot be removed."
    },

    # ─── Server ─────────────────────────────────────────────────────────────
    "store_unavailable": {
        "http": 503,
        "message": "Backing store is unavailable."
    },
    "internal_error": {
        "http": 500,
        "message": "Internal server error."
    },
}
