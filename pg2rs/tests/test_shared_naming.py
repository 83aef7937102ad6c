import pytest

from pg2rs.shared.naming import (
    RUST_KEYWORDS,
    Singularizer,
    resolve_type_name,
    sanitize_field_name,
    sanitize_type_name,
    sanitize_variant_name,
    singularize,
    to_pascal_case,
    to_snake_case,
)


class TestSingularize:
    @pytest.mark.parametrize(
        "plural,singular",
        [
            ("cats", "cat"),
            ("dogs", "dog"),
            ("children", "child"),
            ("people", "person"),
            ("data", "datum"),
            ("analyses", "analysis"),
            ("indices", "index"),
            ("parties", "party"),
            ("categories", "category"),
            ("classes", "class"),
            ("addresses", "address"),
            ("statuses", "status"),
            ("buses", "bus"),
            ("boxes", "box"),
            ("churches", "church"),
            ("dishes", "dish"),
            ("databases", "database"),
            ("responses", "response"),
            ("houses", "house"),
            ("series", "series"),
            ("news", "news"),
            ("cat", "cat"),  # already singular
            ("child", "child"),  # irregular but already singular
            ("status", "status"),
            ("analysis", "analysis"),
            ("class", "class"),
        ],
    )
    def test_singularize(self, plural, singular):
        assert singularize(plural) == singular

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("user_accounts", "user_account"),
            ("UserAccounts", "UserAccount"),
            ("USER_ACCOUNTS", "USER_ACCOUNT"),
            ("order-items", "order-item"),
            ("user_status", "user_status"),
        ],
    )
    def test_singularize_last_word_only(self, name, expected):
        assert singularize(name) == expected

    def test_singularize_case_preservation(self):
        assert singularize("Children") == "Child"
        assert singularize("PEOPLE") == "PERSON"
        assert singularize("Orders") == "Order"
        assert singularize("PARTIES") == "PARTY"

    @pytest.mark.parametrize(
        "name",
        [
            "users", "orders", "Order", "parties", "classes", "statuses",
            "buses", "gases", "aliases", "boxes", "people", "datas",
            "analyses", "series", "USER_ACCOUNTS", "ies", "s", "",
            "responses", "houses", "quizzes",
        ],
    )
    def test_singularize_is_idempotent(self, name):
        once = singularize(name)
        assert singularize(once) == once

    def test_singularize_caching(self):
        result1 = singularize("cats")
        result2 = singularize("cats")
        assert result1 == result2 == "cat"


class TestSingularizer:
    def test_extend_irregular(self):
        rules = Singularizer().extend(irregular={"Cacti": "Cactus"})
        assert rules("cacti") == "cactus"
        assert rules("Cacti") == "Cactus"
        assert rules("cactus") == "cactus"

    def test_extend_invariant(self):
        rules = Singularizer().extend(invariant=["Logs"])
        assert rules("audit_logs") == "audit_logs"
        assert singularize("audit_logs") == "audit_log"

    def test_extend_does_not_modify_original(self):
        base = Singularizer()
        base.extend(irregular={"cacti": "cactus"})
        assert "cacti" not in base.irregular

    def test_custom_rule_table(self):
        rules = Singularizer(rules=(("en", ""),))
        assert rules("oxen") == "ox"
        assert rules("cats") == "cats"


class TestToPascalCase:
    @pytest.mark.parametrize(
        "input_str,expected",
        [
            ("hello_world", "HelloWorld"),
            ("hello-world", "HelloWorld"),
            ("helloWorld", "HelloWorld"),
            ("hello_world_test", "HelloWorldTest"),
            ("single", "Single"),
            ("", ""),
            ("_", ""),
            ("a", "A"),
            ("camelCase", "CamelCase"),
            ("PascalCase", "PascalCase"),
            ("HTTPServer", "HttpServer"),
            ("in progress", "InProgress"),
            ("user.status", "UserStatus"),
        ],
    )
    def test_to_pascal_case(self, input_str, expected):
        assert to_pascal_case(input_str) == expected


class TestToSnakeCase:
    @pytest.mark.parametrize(
        "input_str,expected",
        [
            ("HelloWorld", "hello_world"),
            ("hello-world", "hello_world"),
            ("helloWorld", "hello_world"),
            ("userId", "user_id"),
            ("already_snake", "already_snake"),
            ("double__underscore", "double_underscore"),
            ("Mixed-Case Name", "mixed_case_name"),
            ("ID", "id"),
            ("", ""),
        ],
    )
    def test_to_snake_case(self, input_str, expected):
        assert to_snake_case(input_str) == expected


class TestSanitizeFieldName:
    @pytest.mark.parametrize(
        "column,field",
        [
            ("id", "id"),
            ("userId", "user_id"),
            ("created-at", "created_at"),
            ("type", "r#type"),
            ("match", "r#match"),
            ("self", "self_"),
            ("crate", "crate_"),
            ("super", "super_"),
            ("2fa_enabled", "_2fa_enabled"),
            ("???", "unnamed"),
        ],
    )
    def test_sanitize_field_name(self, column, field):
        assert sanitize_field_name(column) == field


class TestSanitizeTypeName:
    def test_basic(self):
        assert sanitize_type_name("user_status") == "UserStatus"

    def test_self_keyword(self):
        assert sanitize_type_name("self") == "Self_"

    def test_leading_digit(self):
        assert sanitize_type_name("3d_models") == "_3dModels"


class TestSanitizeVariantName:
    @pytest.mark.parametrize(
        "label,variant",
        [
            ("active", "Active"),
            ("in progress", "InProgress"),
            ("in-progress", "InProgress"),
            ("ON_HOLD", "OnHold"),
            ("n/a", "NA"),
            ("1st", "_1st"),
            ("self", "Self_"),
            ("!!", "Unnamed"),
        ],
    )
    def test_sanitize_variant_name(self, label, variant):
        assert sanitize_variant_name(label) == variant


class TestResolveTypeName:
    def test_without_singularization(self):
        assert resolve_type_name("users") == "Users"

    def test_with_singularization(self):
        assert resolve_type_name("users", singular=True) == "User"
        assert resolve_type_name("user_accounts", singular=True) == "UserAccount"

    def test_collision_candidates(self):
        assert resolve_type_name("Order", singular=True) == "Order"
        assert resolve_type_name("orders", singular=True) == "Order"

    def test_custom_singularizer(self):
        rules = Singularizer().extend(invariant=["users"])
        assert resolve_type_name("users", singular=True, singularizer=rules) == "Users"


class TestRustKeywords:
    def test_contains_common_keywords(self):
        for word in ("fn", "struct", "enum", "type", "async", "await", "self", "Self"):
            assert word in RUST_KEYWORDS

    def test_is_frozenset(self):
        assert isinstance(RUST_KEYWORDS, frozenset)
