"""
Tests for restaurant scoping of authenticated users.
"""

import pytest

from shared.security.auth import require_restaurant_access
from shared.utils.exceptions import ForbiddenError


class TestRequireRestaurantAccess:
    def test_super_admin_needs_no_claim(self):
        require_restaurant_access({"user_id": 1, "role": "super_admin"}, 5)

    def test_matching_claim(self):
        require_restaurant_access({"user_id": 1, "role": "staff", "restaurant_id": 5}, 5)

    def test_string_claim_is_compared_as_int(self):
        require_restaurant_access({"user_id": 1, "role": "staff", "restaurant_id": "5"}, 5)

    @pytest.mark.parametrize("claim", [None, 6, "six"])
    def test_other_or_missing_claim_forbidden(self, claim):
        ctx = {"user_id": 1, "role": "restaurant_owner", "restaurant_id": claim}

        with pytest.raises(ForbiddenError) as exc_info:
            require_restaurant_access(ctx, 5)
        assert exc_info.value.status_code == 403
