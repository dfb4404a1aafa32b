from tailwindls.completion.vocabulary import (
    ScreenBreakpoint,
    UtilityClass,
    VocabularyModel,
    load_base_vocabulary,
    vocabulary_from_dict,
)


def test_base_vocabulary_loads():
    model = load_base_vocabulary()

    assert "flex" in model.classes
    assert model.classes["p-{spacing}"].category == "Spacing"
    assert model.colors["red-500"] == "EF4444"
    assert model.colors["black"] == "000000"
    assert model.spacing["0.5"] == "0.125rem"
    assert model.spacing["px"] == "1px"
    assert [s.name for s in model.screens] == ["sm", "md", "lg", "xl", "2xl"]
    assert "hover" in model.modifiers
    assert model.prefix is None


def test_base_colors_are_normalized():
    model = load_base_vocabulary()

    for value in model.colors.values():
        assert len(value) == 6
        assert value == value.upper()


def test_expand_classes():
    model = VocabularyModel(
        classes={
            "flex": UtilityClass("flex"),
            "bg-{color}": UtilityClass("bg-{color}"),
            "p-{spacing}": UtilityClass("p-{spacing}"),
            "max-w-screen-{screen}": UtilityClass("max-w-screen-{screen}"),
        },
        screens=[ScreenBreakpoint("sm", "640px")],
        colors={"red-500": "EF4444"},
        spacing={"4": "1rem", "px": "1px"},
    )

    names = [expanded.name for expanded in model.expand_classes()]

    assert names == ["flex", "bg-red-500", "p-4", "p-px", "max-w-screen-sm"]


def test_find_class_respects_prefix():
    model = vocabulary_from_dict({
        "classes": {"p-{spacing}": "Spacing"},
        "spacing": {"4": "1rem"},
        "prefix": "tw-",
    })

    found = model.find_class("tw-p-4")

    assert found is not None
    assert found.spacing == "4"
    assert model.find_class("p-4") is None
    assert model.find_class("tw-p-5") is None


def test_set_screen_replaces_in_place():
    model = VocabularyModel(screens=[ScreenBreakpoint("sm", "640px"), ScreenBreakpoint("md", "768px")])

    model.set_screen("sm", "600px")
    model.set_screen("xs", "400px")

    assert model.screens == [
        ScreenBreakpoint("sm", "600px"),
        ScreenBreakpoint("md", "768px"),
        ScreenBreakpoint("xs", "400px"),
    ]


def test_copy_is_independent():
    model = load_base_vocabulary()

    copied = model.copy()
    copied.colors["brand"] = "123456"
    copied.modifiers.append("open")

    assert "brand" not in model.colors
    assert "open" not in model.modifiers
