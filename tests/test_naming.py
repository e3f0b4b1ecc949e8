import pytest

from crategen.codegen.core.naming import (
    RESERVED_FIELD_NAMES,
    TYPE_NAME_OVERRIDES,
    TYPE_NAME_OVERRIDES_VERSION,
    TypeNameSanitizer,
    error_type_name,
    field_name,
    streaming_type_name,
    to_snake_case,
    type_name,
)


class TestTypeName:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("PutItemInput", "PutItemInput"),
            ("putItemInput", "PutItemInput"),
            ("Origin_Access_Identity", "OriginAccessIdentity"),
            ("String", "String"),
        ],
    )
    def test_general_rule(self, name, expected):
        assert type_name(name) == expected

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Error", "S3Error"),
            ("CancelSpotFleetRequests", "EC2CancelSpotFleetRequests"),
            ("Option", "RDSOption"),
        ],
    )
    def test_collision_table(self, name, expected):
        assert type_name(name) == expected
        assert TYPE_NAME_OVERRIDES[name] == expected

    def test_override_applies_after_underscores_removed(self):
        assert type_name("Opt_ion") == "RDSOption"

    def test_table_is_versioned(self):
        assert isinstance(TYPE_NAME_OVERRIDES_VERSION, int)


class TestTypeNameSanitizer:
    def test_extra_overrides(self):
        sanitizer = TypeNameSanitizer({"Result": "ServiceResult"})
        assert sanitizer.type_name("Result") == "ServiceResult"
        assert sanitizer.type_name("Error") == "S3Error"

    def test_extra_overrides_do_not_leak(self):
        TypeNameSanitizer({"Result": "ServiceResult"})
        assert type_name("Result") == "Result"

    def test_streaming_type_name(self):
        assert streaming_type_name("Body") == "StreamingBody"
        assert TypeNameSanitizer().streaming_type_name("body_blob") == "StreamingBodyblob"

    def test_error_type_name(self):
        assert error_type_name("PutItem") == "PutItemError"
        assert error_type_name("CancelSpotFleetRequests") == "EC2CancelSpotFleetRequestsError"

    def test_caching(self):
        sanitizer = TypeNameSanitizer()
        assert sanitizer.type_name("Error") is sanitizer.type_name("Error")


class TestFieldName:
    @pytest.mark.parametrize(
        "member,expected",
        [
            ("Name", "name"),
            ("MaxResults", "max_results"),
            ("DBInstanceIdentifier", "db_instance_identifier"),
            ("nextToken", "next_token"),
            ("type", "type_"),
            ("Type", "type_"),
            ("return", "return_"),
            ("Return", "return_"),
        ],
    )
    def test_field_name(self, member, expected):
        assert field_name(member) == expected

    def test_reserved_words(self):
        assert RESERVED_FIELD_NAMES == {"return", "type"}
        for word in RESERVED_FIELD_NAMES:
            assert field_name(word) != word


class TestToSnakeCase:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("PutItem", "put_item"),
            ("ListTagsForResource", "list_tags_for_resource"),
            ("EC2Instance", "ec2_instance"),
            ("already_snake", "already_snake"),
            ("with-dash", "with_dash"),
            ("ETag", "e_tag"),
        ],
    )
    def test_to_snake_case(self, name, expected):
        assert to_snake_case(name) == expected
