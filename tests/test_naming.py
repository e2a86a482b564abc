"""Tests for case conversion and identifier sanitizing."""

import pytest

from flutter_codegen.codegen.core.naming import (
    NameSanitizer,
    NamingCase,
    convert_case,
    pluralize,
    singularize,
    to_camel_case,
    to_kebab_case,
    to_pascal_case,
    to_snake_case,
    to_title_words,
)
from flutter_codegen.codegen.flutter.naming import (
    create_dart_sanitizer,
    dart_class_name,
    dart_field_name,
)


class TestCaseConversion:
    """Tests for the pure case converters."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("UserProfile", "user_profile"),
            ("userProfile", "user_profile"),
            ("user-profile", "user_profile"),
            ("HTTPServer", "http_server"),
            ("created_at", "created_at"),
            ("", ""),
        ],
    )
    def test_snake_case(self, name, expected):
        assert to_snake_case(name) == expected

    def test_camel_case(self):
        assert to_camel_case("created_at") == "createdAt"
        assert to_camel_case("BlogPost") == "blogPost"
        assert to_camel_case("id") == "id"

    def test_pascal_case(self):
        assert to_pascal_case("blog_post") == "BlogPost"
        assert to_pascal_case("user") == "User"

    def test_kebab_case(self):
        assert to_kebab_case("BlogPost") == "blog-post"

    def test_title_words(self):
        assert to_title_words("email_verified_at") == "Email Verified At"

    def test_convert_case_dispatch(self):
        assert convert_case("blog_post", NamingCase.PASCAL_CASE) == "BlogPost"
        assert convert_case("BlogPost", NamingCase.KEBAB_CASE) == "blog-post"


class TestPluralization:
    """Tests for the naive English plural rules."""

    @pytest.mark.parametrize(
        "word,plural",
        [("user", "users"), ("category", "categories"), ("box", "boxes"), ("day", "days")],
    )
    def test_pluralize(self, word, plural):
        assert pluralize(word) == plural

    def test_singularize(self):
        assert singularize("users") == "user"
        assert singularize("categories") == "category"
        assert singularize("boxes") == "box"
        assert singularize("address") == "address"


class TestNameSanitizer:
    """Tests for reserved-word escaping."""

    def test_reserved_word_gets_suffix(self):
        sanitizer = NameSanitizer({"class"})
        assert sanitizer.sanitize_name("class") == "classValue"

    def test_leading_digit_is_prefixed(self):
        assert NameSanitizer().sanitize_name("2fa_code") == "n2faCode"

    def test_empty_name_becomes_field(self):
        assert NameSanitizer().sanitize_name("") == "field"

    def test_dart_field_names(self):
        sanitizer = create_dart_sanitizer()
        assert dart_field_name(sanitizer, "is_active") == "isActive"
        assert dart_field_name(sanitizer, "default") == "defaultValue"
        assert dart_field_name(sanitizer, "hash_code") == "hashCodeValue"

    def test_dart_class_names(self):
        sanitizer = create_dart_sanitizer()
        assert dart_class_name(sanitizer, "blog_post") == "BlogPost"
        assert dart_class_name(sanitizer, "User") == "User"
