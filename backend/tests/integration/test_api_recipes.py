"""
Integration tests for recipe endpoints.
"""

import pytest
from unittest.mock import MagicMock

from wastewise.api import deps


RECIPE = {
    "id": "recipe-1",
    "title": "Veggie Curry",
    "user_id": "someone-else",
    "is_public": True,
    "dietary_tags": ["vegan"],
}


class DuplicateKeyError(Exception):
    """Stand-in for a PostgREST error carrying a Postgres code."""

    def __init__(self, code):
        super().__init__("duplicate key value violates unique constraint")
        self.code = code


class TestListRecipes:
    @pytest.mark.integration
    def test_saved_flag(self, authed_client, mock_supabase, supabase_query):
        mock_supabase.tables["recipes"] = supabase_query([RECIPE, {**RECIPE, "id": "recipe-2"}])
        mock_supabase.tables["user_saved_recipes"] = supabase_query([{"recipe_id": "recipe-2"}])

        response = authed_client.get("/api/recipes")

        assert response.status_code == 200
        assert [r["saved"] for r in response.json()["data"]] == [False, True]

    @pytest.mark.integration
    def test_visibility_and_filters(self, authed_client, mock_supabase, test_user_id):
        authed_client.get("/api/recipes", params={"dietary_tags": "vegan", "difficulty": "easy"})

        query = mock_supabase.tables["recipes"]
        query.or_.assert_called_once_with(f"is_public.eq.true,user_id.eq.{test_user_id}")
        query.contains.assert_called_once_with("dietary_tags", ["vegan"])
        query.eq.assert_any_call("difficulty", "easy")

    @pytest.mark.integration
    def test_saved_only_without_saved_recipes(self, authed_client, mock_supabase):
        response = authed_client.get("/api/recipes", params={"saved_only": True})

        assert response.json() == {"data": []}
        assert "recipes" not in mock_supabase.tables


class TestRecipeCrud:
    @pytest.mark.integration
    def test_create(self, authed_client, mock_supabase, supabase_query, test_user_id):
        query = supabase_query([{**RECIPE, "user_id": test_user_id}])
        mock_supabase.tables["recipes"] = query

        response = authed_client.post("/api/recipes", json={
            "title": "Veggie Curry",
            "ingredients": [{"name": "chickpeas", "quantity": 1, "unit": "can"}],
            "instructions": ["Simmer everything"],
        })

        assert response.status_code == 201
        assert response.json()["data"]["saved"] is False
        assert query.insert.call_args.args[0]["user_id"] == test_user_id

    @pytest.mark.integration
    def test_create_requires_instructions(self, authed_client):
        response = authed_client.post("/api/recipes", json={
            "title": "Veggie Curry",
            "ingredients": [{"name": "chickpeas"}],
            "instructions": [],
        })
        assert response.status_code == 400

    @pytest.mark.integration
    def test_get_missing(self, authed_client):
        response = authed_client.get("/api/recipes/nope")
        assert response.status_code == 404

    @pytest.mark.integration
    def test_update_not_owned(self, authed_client):
        # The update matches no row when the caller is not the owner
        response = authed_client.put("/api/recipes/recipe-1", json={"title": "Mine now"})
        assert response.status_code == 404


class TestSaveRecipe:
    @pytest.mark.integration
    def test_save(self, authed_client, mock_supabase, supabase_query, test_user_id):
        mock_supabase.tables["recipes"] = supabase_query([RECIPE])
        saved = supabase_query([{"user_id": test_user_id, "recipe_id": "recipe-1"}])
        mock_supabase.tables["user_saved_recipes"] = saved

        response = authed_client.post("/api/recipes/recipe-1/save")

        assert response.status_code == 201
        saved.insert.assert_called_once_with({"user_id": test_user_id, "recipe_id": "recipe-1"})

    @pytest.mark.integration
    def test_save_twice_conflicts(self, authed_client, mock_supabase, supabase_query):
        mock_supabase.tables["recipes"] = supabase_query([RECIPE])
        saved = supabase_query()
        saved.execute.side_effect = DuplicateKeyError("23505")
        mock_supabase.tables["user_saved_recipes"] = saved

        response = authed_client.post("/api/recipes/recipe-1/save")

        assert response.status_code == 409
        assert response.json() == {"error": "Recipe already saved"}

    @pytest.mark.integration
    def test_save_invisible_recipe(self, authed_client):
        response = authed_client.post("/api/recipes/private-recipe/save")
        assert response.status_code == 404

    @pytest.mark.integration
    def test_other_insert_errors_are_500(self, authed_client, mock_supabase, supabase_query):
        mock_supabase.tables["recipes"] = supabase_query([RECIPE])
        saved = supabase_query()
        saved.execute.side_effect = DuplicateKeyError("08006")
        mock_supabase.tables["user_saved_recipes"] = saved

        response = authed_client.post("/api/recipes/recipe-1/save")
        assert response.status_code == 500

    @pytest.mark.integration
    def test_unsave(self, authed_client, mock_supabase, test_user_id):
        response = authed_client.delete("/api/recipes/recipe-1/save")

        assert response.status_code == 200
        query = mock_supabase.tables["user_saved_recipes"]
        query.eq.assert_any_call("recipe_id", "recipe-1")
        query.eq.assert_any_call("user_id", test_user_id)


class TestDetailedRecipe:
    @pytest.mark.integration
    def test_unavailable_without_ai(self, authed_client):
        response = authed_client.post("/api/recipes/recipe-1/detailed", json={"recipe_title": "Curry"})

        assert response.status_code == 503
        assert response.json() == {"error": "AI service not available"}

    @pytest.mark.integration
    def test_detailed(self, authed_app, mock_ai_service):
        from fastapi.testclient import TestClient

        mock_ai_service.generate_detailed_recipe.return_value = {
            "title": "Curry",
            "chef_tips": ["Toast the spices"],
        }
        authed_app.dependency_overrides[deps.get_ai] = lambda: mock_ai_service

        response = TestClient(authed_app).post("/api/recipes/recipe-1/detailed", json={
            "recipe_title": "Curry",
            "basic_ingredients": [{"name": "chickpeas", "quantity": 1, "unit": "can"}],
            "basic_instructions": ["Simmer"],
        })

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == "recipe-1"
        assert data["chef_tips"] == ["Toast the spices"]
        kwargs = mock_ai_service.generate_detailed_recipe.call_args.kwargs
        assert kwargs["ingredients"] == [{"name": "chickpeas", "quantity": 1.0, "unit": "can"}]

    @pytest.mark.integration
    def test_generation_failure(self, authed_app):
        from fastapi.testclient import TestClient

        ai = MagicMock()
        ai.generate_detailed_recipe.side_effect = RuntimeError("bad json")
        authed_app.dependency_overrides[deps.get_ai] = lambda: ai

        response = TestClient(authed_app).post("/api/recipes/recipe-1/detailed", json={"recipe_title": "Curry"})
        assert response.status_code == 500
