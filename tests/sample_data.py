"""Sample Aha payloads shared by the client and custom field tests."""

PRODUCT = {
    "id": "1001",
    "reference_prefix": "APP",
    "name": "App",
    "screen_definitions": [
        {
            "screenable_type": "Feature",
            "custom_field_definitions": [
                {"key": "ghe_url", "name": "GitHub URL",
                 "type": "CustomFieldDefinitions::UrlField", "api_type": "url"},
                {"key": "notes", "name": "Notes",
                 "type": "CustomFieldDefinitions::NoteField", "api_type": "note"},
                {"key": "team", "name": "Team",
                 "type": "CustomFieldDefinitions::SelectConstant", "api_type": "string",
                 "options": [{"id": "101", "label": "Core"}, {"id": "102", "label": "Web"}]},
                {"key": "platforms", "name": "Platforms",
                 "type": "CustomFieldDefinitions::SelectMultipleConstant", "api_type": "array"},
                {"key": "squads", "name": "Squads",
                 "type": "CustomFieldDefinitions::LinkMany", "api_type": "array",
                 "options": [{"id": "9001", "label": "Alpha"},
                             {"id": "9002", "label": "Beta"},
                             {"id": "9003", "label": " Gamma "}]},
                {"key": "due", "name": "Due",
                 "type": "CustomFieldDefinitions::DateField", "api_type": "date"},
                {"key": "broken", "name": "Broken",
                 "type": "CustomFieldDefinitions::TextField", "api_type": "html"},
            ]
        },
        {
            "screenable_type": "Release",
            "custom_field_definitions": [
                {"key": "codename", "name": "Codename",
                 "type": "CustomFieldDefinitions::TextField", "api_type": "string"},
            ]
        }
    ]
}

FEATURE = {
    "id": "5001",
    "reference_num": "APP-12",
    "name": "Login",
    "custom_fields": [
        {"key": "ghe_url", "name": "GitHub URL", "type": "url",
         "value": "https://github.com/org/repo/issues/1"},
        {"key": "team", "name": "Team", "type": "string", "value": "Core"},
        {"key": "platforms", "name": "Platforms", "type": "array", "value": ["iOS", "Android"]},
    ],
    "custom_object_links": [
        {"key": "squads", "name": "Squads", "record_type": "Squad", "record_ids": ["9002", "9001"]},
    ]
}
