from scenegen.naming import drop_prefix, path_to_symbol, snake_to_symbol, token_name


def test_token_name_lowercases_all_caps_tokens():
    assert token_name("HEALTH") == "health"
    assert token_name("HP2") == "hp2"


def test_token_name_lowercases_only_first_letter_of_mixed_tokens():
    assert token_name("Health") == "health"
    assert token_name("HealthBar") == "healthBar"
    assert token_name("health") == "health"


def test_token_name_keeps_empty_string():
    assert token_name("") == ""


def test_snake_to_symbol_camel_cases_parts():
    assert snake_to_symbol("move_left") == "moveLeft"
    assert snake_to_symbol("ui_page_up") == "uiPageUp"
    assert snake_to_symbol("JUMP") == "jump"


def test_snake_to_symbol_normalizes_only_the_first_part():
    assert snake_to_symbol("RUN_fast") == "runFast"
    assert snake_to_symbol("Attack_HEAVY") == "attackHEAVY"


def test_snake_to_symbol_ignores_empty_parts():
    assert snake_to_symbol("_idle__loop_") == "idleLoop"
    assert snake_to_symbol("") == ""
    assert snake_to_symbol("___") == ""


def test_path_to_symbol_keeps_segments_separated():
    assert path_to_symbol(["Player", "HealthBar"]) == "player_healthBar"
    assert path_to_symbol(["HUD", "Score"]) == "hud_score"
    assert path_to_symbol(["Sprite"]) == "sprite"


def test_path_to_symbol_does_not_camel_case_snake_segments():
    assert path_to_symbol(["Hit_Box"]) == "hit_Box"


def test_drop_prefix_only_strips_leading_prefix():
    assert drop_prefix("input/jump", "input/") == "jump"
    assert drop_prefix("audio/volume", "input/") == "audio/volume"
    assert drop_prefix("jump", "") == "jump"
