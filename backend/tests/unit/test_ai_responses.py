"""
Unit tests for model output parsing.
"""

import pytest

from wastewise.services.ai_responses import (
    AIResponseError,
    RecipePayloadKind,
    classify_recipe_payload,
    extract_json,
    normalize_meal_plan_payload,
    normalize_recipe_payload,
    normalize_tips,
)


class TestExtractJson:
    """Tests for extract_json."""

    @pytest.mark.unit
    def test_raw_json(self):
        assert extract_json('{"a": 1}') == {"a": 1}

    @pytest.mark.unit
    def test_fenced_json(self):
        text = 'Here you go:\n```json\n{"recipes": []}\n```\nEnjoy!'
        assert extract_json(text) == {"recipes": []}

    @pytest.mark.unit
    def test_json_in_prose(self):
        assert extract_json('Sure! {"tips": ["a"]} Hope that helps.') == {"tips": ["a"]}

    @pytest.mark.unit
    def test_array_in_prose(self):
        assert extract_json('The list: ["a", "b"]') == ["a", "b"]

    @pytest.mark.unit
    @pytest.mark.parametrize("text", [None, "", "   ", "not json at all", "{broken"])
    def test_unusable_output_raises(self, text):
        with pytest.raises(AIResponseError):
            extract_json(text)


class TestRecipePayloads:
    """Tests for recipe payload classification and normalization."""

    @pytest.mark.unit
    def test_classify(self):
        assert classify_recipe_payload({"recipes": [{"title": "a"}]}) == RecipePayloadKind.WRAPPED
        assert classify_recipe_payload([{"title": "a"}]) == RecipePayloadKind.ARRAY
        assert classify_recipe_payload({"title": "a"}) == RecipePayloadKind.SINGLE
        assert classify_recipe_payload({"recipes": []}) == RecipePayloadKind.EMPTY
        assert classify_recipe_payload([]) == RecipePayloadKind.EMPTY
        assert classify_recipe_payload("text") == RecipePayloadKind.EMPTY

    @pytest.mark.unit
    def test_wrapped_payload(self, sample_recipe_payload):
        recipes = normalize_recipe_payload(sample_recipe_payload)

        assert [r["title"] for r in recipes] == ["Chicken Fried Rice", "Broccoli Soup"]
        assert recipes[0]["difficulty"] == "easy"
        assert recipes[0]["total_time"] == 45

    @pytest.mark.unit
    def test_defaults_are_filled(self):
        recipe = normalize_recipe_payload({"title": "Broccoli Soup"})[0]

        assert recipe["id"].startswith("ai-recipe-")
        assert recipe["servings"] == 4
        assert recipe["match_percentage"] == 80
        assert recipe["ingredients"] == []
        assert recipe["generated"] is True
        assert recipe["saved"] is False

    @pytest.mark.unit
    def test_single_wrapped_object(self):
        recipes = normalize_recipe_payload({"recipes": {"title": "Omelette", "id": "r1"}})
        assert recipes[0]["id"] == "r1"

    @pytest.mark.unit
    def test_non_dict_items_are_skipped(self):
        recipes = normalize_recipe_payload([{"title": "Good"}, "bad", 3])
        assert len(recipes) == 1

    @pytest.mark.unit
    @pytest.mark.parametrize("payload", [{"recipes": []}, [], ["a", "b"], "text"])
    def test_no_recipes_raises(self, payload):
        with pytest.raises(AIResponseError):
            normalize_recipe_payload(payload)

    @pytest.mark.unit
    def test_text_times_are_coerced(self):
        """Times written as text still produce whole minutes."""
        recipes = normalize_recipe_payload({"recipes": [
            {"title": "Good"},
            {"title": "Stringy", "prep_time": "10 minutes", "cook_time": 20, "servings": "serves 2"},
        ]})

        stringy = recipes[1]
        assert stringy["prep_time"] == 10
        assert stringy["total_time"] == 30
        assert stringy["servings"] == 2

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["quick", None, -5, 0, True, ["10"]])
    def test_unusable_times_use_defaults(self, value):
        recipe = normalize_recipe_payload({"title": "Soup", "prep_time": value, "cook_time": value})[0]
        assert (recipe["prep_time"], recipe["cook_time"], recipe["total_time"]) == (15, 30, 45)


class TestMealPlanPayloads:
    @pytest.mark.unit
    def test_optional_sections_are_filled(self):
        plan = normalize_meal_plan_payload({"meal_plan": [{"day": 1, "meals": {}}]})

        assert plan["meal_plan"] == [{"day": 1, "meals": []}]
        assert plan["shopping_list"] == ["Check your pantry for additional seasonings and basics"]
        assert len(plan["tips"]) == 3

    @pytest.mark.unit
    def test_slot_keyed_meals_become_a_list(self):
        plan = normalize_meal_plan_payload({"meal_plan": [{
            "day": 1,
            "meals": {
                "breakfast": {"name": "Oats", "ingredients_used": ["oats"], "prep_time": 5},
                "dinner": {"name": "Stir fry", "ingredients_used": ["rice", "peppers"]},
                "dessert": {"name": "Baked apples", "ingredients_used": "apples"},
            },
        }]})

        meals = plan["meal_plan"][0]["meals"]
        assert [m["slot"] for m in meals] == ["breakfast", "dinner", "snack"]
        assert meals[0] == {"slot": "breakfast", "name": "Oats", "ingredients_used": ["oats"], "prep_time": 5}
        assert meals[2]["ingredients_used"] == ["apples"]

    @pytest.mark.unit
    def test_listed_meals_without_slots_follow_day_order(self):
        plan = normalize_meal_plan_payload({"meal_plan": [
            {"meals": [{"name": "Toast"}, {"title": "Salad"}]},
        ]})

        day = plan["meal_plan"][0]
        assert day["day"] == 1
        assert [(m["slot"], m["name"]) for m in day["meals"]] == [("breakfast", "Toast"), ("lunch", "Salad")]

    @pytest.mark.unit
    def test_chef_tips_are_accepted(self):
        plan = normalize_meal_plan_payload({"meal_plan": [], "chef_tips": ["Batch cook"]})
        assert plan["tips"] == ["Batch cook"]

    @pytest.mark.unit
    @pytest.mark.parametrize("payload", [
        [],
        {"meal_plan": "monday"},
        {"plan": []},
        {"meal_plan": ["monday"]},
        {"meal_plan": [{"day": 1, "meals": "leftovers"}]},
        {"meal_plan": [{"day": "monday", "meals": []}]},
    ])
    def test_invalid_structure(self, payload):
        with pytest.raises(AIResponseError):
            normalize_meal_plan_payload(payload)


class TestTips:
    @pytest.mark.unit
    def test_wrapped_and_bare(self):
        assert normalize_tips({"tips": ["a", "b"]}) == ["a", "b"]
        assert normalize_tips(["a", " ", "b"]) == ["a", "b"]

    @pytest.mark.unit
    def test_capped_at_four(self):
        assert len(normalize_tips([str(i) for i in range(10)])) == 4

    @pytest.mark.unit
    def test_not_a_list(self):
        with pytest.raises(AIResponseError):
            normalize_tips({"tips": "keep cold"})
