"""
Explicit validation & Pydantic models
- Request bodies for the command routes
- The read-only snapshot the presentation layer renders from
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .types import PALETTE, Outcome


# 1. Palette entry, so clients can label the color ids
class ColorOut(BaseModel):
    id: int = Field(..., description="Color id used in guesses and secrets")
    name: str = Field(..., description="Human-readable color name")


# 2. Validates the color the player taps
class AddColorRequest(BaseModel):
    color: int = Field(..., description=f"Palette index between 0 and {len(PALETTE) - 1}.")

    @field_validator("color")
    @classmethod
    def validate_color(cls, color: int) -> int:
        if color < 0 or color >= len(PALETTE):
            raise ValueError(f"Color must be between 0 and {len(PALETTE) - 1} inclusive.")
        return color

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"color": 0},   # red
                {"color": 6},   # white
            ]
        }
    }


# 3. One committed row, with hints limited to what has been disclosed
class RowOut(BaseModel):
    guess: List[int] = Field(..., description="The committed guess")
    outcomes: Optional[List[Outcome]] = Field(
        None, description="Per-peg hints disclosed so far (easy only)"
    )
    correct: Optional[int] = Field(None, description="Pegs right color, right place (once revealed)")
    wrong_position: Optional[int] = Field(None, description="Pegs right color, wrong place (once revealed)")


class CountdownOut(BaseModel):
    active: bool = Field(..., description="Pre-game 3-2-1 overlay is showing")
    value: int = Field(..., description="Number currently shown")


class RevealOut(BaseModel):
    revealing_row_index: Optional[int] = Field(None, description="Row being animated, if any")
    revealed_peg_count: int = Field(0, description="How many of its pegs are disclosed")


# 4. Everything the board needs, recomputed after every command
class GameSnapshot(BaseModel):
    game_id: str = Field(..., description="Unique ID for the game")
    difficulty: Literal["easy", "difficult"] = Field(..., description="Chosen difficulty level")
    code_length: int = Field(..., description="Pegs per row")
    attempts_max: int = Field(..., description="Rows on the board")
    attempts_left: int = Field(..., description="Rows not yet submitted")
    secret: Optional[List[int]] = Field(None, description="The secret code (only once the game is over)")
    rows: List[RowOut] = Field(..., description="Submitted rows, oldest first")
    current_guess: List[int] = Field(..., description="Colors picked for the row being built")
    current_row_index: Optional[int] = Field(None, description="Row accepting input, if any")
    seconds_left: int = Field(..., description="Clock value")
    flash: bool = Field(..., description="Low-time blink phase")
    clock_running: bool = Field(..., description="Clock is counting down")
    game_over: bool = Field(..., description="No more input accepted")
    won: bool = Field(..., description="The code was cracked")
    show_game_over: bool = Field(..., description="Game-over overlay is due")
    disabled_colors: List[int] = Field(..., description="Colors proven absent (easy only)")
    countdown: CountdownOut
    reveal: RevealOut
    paused: bool = Field(..., description="Paused overlay is showing")
    help_open: bool = Field(..., description="Help overlay is showing")
