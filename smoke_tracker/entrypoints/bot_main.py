"""Entry point for the smoke tracker Telegram bot.

Usage:
    export BOT_TOKEN="<your_token>"
    python -m smoke_tracker.entrypoints.bot_main
"""

from __future__ import annotations

import asyncio
import datetime as dt
import logging

from aiogram import Bot, Dispatcher, F
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command, CommandObject, CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import State, StatesGroup
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.types import CallbackQuery, Message
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from smoke_tracker import settings
from smoke_tracker.core import metrics
from smoke_tracker.core.entities.coping_strategy import COPING_STRATEGIES
from smoke_tracker.core.entities.craving import CravingEvent
from smoke_tracker.core.entities.smoking_event import SmokingEvent
from smoke_tracker.core.errors import PersistenceError, ValidationError
from smoke_tracker.core.state import TrackerState
from smoke_tracker.core.usecases import (
    compute_dashboard_stats as dashboard_uc,
    compute_milestone_status as milestones_uc,
    record_craving as record_craving_uc,
    record_smoking_event as record_smoke_uc,
    update_configuration as update_config_uc,
)
from smoke_tracker.dataproviders.db import init_db
from smoke_tracker.dataproviders.repositories.config_repository import SqlAlchemyConfigurationRepository
from smoke_tracker.dataproviders.repositories.event_repository import (
    SqlAlchemyCravingRepository,
    SqlAlchemySmokingEventRepository,
)
from smoke_tracker.utils import hub
from smoke_tracker.utils.craving_timer import CravingTimer
from smoke_tracker.utils.input_parsing import parse_event_time

logger = logging.getLogger(__name__)

dp = Dispatcher(storage=MemoryStorage())

# Scheduler setup (craving countdowns only)
scheduler = AsyncIOScheduler(timezone="UTC")

SAVE_FAILED_TEXT = "⚠️ Saved for this session only: the record could not be written to disk."

# Settings fields editable with /set <name> <value>
SETTABLE_FIELDS: dict[str, tuple[str, type]] = {
    "cigs": ("cigarettes_per_day_before", int),
    "price": ("price_per_pack", float),
    "pack": ("cigarettes_per_pack", int),
}

# chat id -> running craving countdown
ACTIVE_CRAVINGS: dict[int, CravingTimer] = {}
# chat id -> coping strategy chosen during the running countdown
CHOSEN_STRATEGIES: dict[int, str] = {}
# chat id -> hub message id
HUB_MESSAGES: dict[int, int] = {}


class SmokeLogState(StatesGroup):
    trigger = State()
    mood = State()
    location = State()
    time = State()
    notes = State()


class CravingState(StatesGroup):
    intensity = State()
    strategy = State()


def _now(tracker: TrackerState) -> dt.datetime:
    return dt.datetime.now(tracker.tz)


def _answer_text(message: Message) -> str:
    """Text of a step answer; /skip counts as empty."""
    text = (message.text or "").strip()
    return "" if text == "/skip" else text


# ---------------------------------------------------------------------------
# Hub refresh function
# ---------------------------------------------------------------------------


async def refresh_hub(bot: Bot, chat_id: int, tracker: TrackerState) -> None:
    """Create or update the single hub message for the chat."""
    try:
        stats = dashboard_uc.execute(tracker, _now(tracker))
        text = hub.build_hub_text(stats, tracker.config_store.get())
    except ValidationError as exc:
        text = f"⚠️ {exc.message}. Fix it with /quitdate YYYY-MM-DD"
    keyboard = hub.build_hub_keyboard()

    message_id = HUB_MESSAGES.get(chat_id)
    if message_id is not None:
        try:
            await bot.edit_message_text(chat_id=chat_id, message_id=message_id, text=text, reply_markup=keyboard)
            return
        except TelegramBadRequest as e:
            if "message is not modified" in str(e).lower():
                return  # nothing to update
            # other bad request -> send new
    sent = await bot.send_message(chat_id, text=text, reply_markup=keyboard)
    HUB_MESSAGES[chat_id] = sent.message_id


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


@dp.message(CommandStart())
async def cmd_start(message: Message, bot: Bot, tracker: TrackerState, state: FSMContext) -> None:
    await state.clear()
    HUB_MESSAGES.pop(message.chat.id, None)
    await refresh_hub(bot, message.chat.id, tracker)


@dp.callback_query(F.data == "REFRESH")
async def handle_refresh(callback: CallbackQuery, bot: Bot, tracker: TrackerState) -> None:
    await refresh_hub(bot, callback.message.chat.id, tracker)
    await callback.answer("Updated")


# --- smoking session flow ---------------------------------------------------


@dp.callback_query(F.data == "SMOKE_NOW")
async def handle_smoke_now(callback: CallbackQuery, state: FSMContext) -> None:
    await state.set_state(SmokeLogState.trigger)
    await callback.answer()
    await callback.message.answer("What triggered it?", reply_markup=hub.build_trigger_keyboard())


@dp.callback_query(SmokeLogState.trigger, F.data.startswith("TRIGGER:"))
async def handle_trigger(callback: CallbackQuery, state: FSMContext) -> None:
    await state.update_data(trigger_type=callback.data.split(":", 1)[1])
    await state.set_state(SmokeLogState.mood)
    await callback.answer()
    await callback.message.edit_text("How were you feeling?", reply_markup=hub.build_mood_keyboard())


@dp.callback_query(SmokeLogState.mood, F.data.startswith("MOOD:"))
async def handle_mood(callback: CallbackQuery, state: FSMContext) -> None:
    await state.update_data(mood=callback.data.split(":", 1)[1])
    await state.set_state(SmokeLogState.location)
    await callback.answer()
    await callback.message.edit_text("Where were you? Send a message, or /skip.")


@dp.message(SmokeLogState.location)
async def handle_location(message: Message, state: FSMContext) -> None:
    await state.update_data(location=_answer_text(message))
    await state.set_state(SmokeLogState.time)
    await message.answer("When was it? Send HH:MM or YYYY-MM-DD HH:MM, or /skip for now.")


@dp.message(SmokeLogState.time)
async def handle_time(message: Message, tracker: TrackerState, state: FSMContext) -> None:
    try:
        when = parse_event_time(_answer_text(message), _now(tracker))
    except ValueError as exc:
        await message.reply(f"Could not read the time: {exc}. Try again or /skip.")
        return
    await state.update_data(timestamp=when.isoformat())
    await state.set_state(SmokeLogState.notes)
    await message.answer("Any notes? Send a message, or /skip.")


@dp.message(SmokeLogState.notes)
async def handle_notes(message: Message, bot: Bot, tracker: TrackerState, state: FSMContext) -> None:
    notes = _answer_text(message)
    data = await state.get_data()
    await state.clear()

    try:
        record_smoke_uc.execute(
            tracker,
            trigger_type=data["trigger_type"],
            mood=data["mood"],
            location=data.get("location", ""),
            notes=notes,
            timestamp=dt.datetime.fromisoformat(data["timestamp"]) if "timestamp" in data else None,
            now=_now(tracker),
        )
        await message.answer("Session logged. Tomorrow is a new day 💙")
    except ValidationError as exc:
        await message.reply(f"Could not log the session: {exc.message}")
        return
    except PersistenceError:
        logger.exception("Failed to persist smoking session")
        await message.answer(SAVE_FAILED_TEXT)
    await refresh_hub(bot, message.chat.id, tracker)


# --- craving flow -----------------------------------------------------------


@dp.callback_query(F.data == "CRAVING")
async def handle_craving(callback: CallbackQuery, state: FSMContext) -> None:
    if callback.message.chat.id in ACTIVE_CRAVINGS:
        await callback.answer("A craving timer is already running", show_alert=True)
        return
    await state.set_state(CravingState.intensity)
    await callback.answer()
    await callback.message.answer("How strong is the craving?", reply_markup=hub.build_intensity_keyboard())


@dp.callback_query(CravingState.intensity, F.data.startswith("INTENSITY:"))
async def handle_intensity(callback: CallbackQuery, bot: Bot, tracker: TrackerState, state: FSMContext) -> None:
    await state.set_state(CravingState.strategy)
    chat_id = callback.message.chat.id
    intensity = int(callback.data.split(":", 1)[1])

    async def on_finish(successful: bool, started_at: dt.datetime, duration: float) -> None:
        ACTIVE_CRAVINGS.pop(chat_id, None)
        strategy = CHOSEN_STRATEGIES.pop(chat_id, "")
        await state.clear()
        try:
            record_craving_uc.execute(
                tracker,
                intensity=intensity,
                duration=duration,
                was_successful=successful,
                coping_strategy=strategy,
                timestamp=started_at,
            )
        except PersistenceError:
            logger.exception("Failed to persist craving")
            await bot.send_message(chat_id, SAVE_FAILED_TEXT)
        text = "💪 You rode it out!" if successful else "Logged. Cravings pass, keep going."
        await bot.send_message(chat_id, text)
        await refresh_hub(bot, chat_id, tracker)

    timer = CravingTimer(
        scheduler,
        job_id=f"craving-{chat_id}",
        seconds=settings.CRAVING_TIMER_SECONDS,
        on_finish=on_finish,
    )
    ACTIVE_CRAVINGS[chat_id] = timer
    timer.start()

    await callback.answer()
    await callback.message.edit_text(
        f"Hold on for {hub.format_countdown(timer.remaining)}. It will pass.\n\n"
        + hub.build_strategies_text(COPING_STRATEGIES)
        + "\n\nPick what you are trying, or type your own.",
        reply_markup=hub.build_craving_keyboard(COPING_STRATEGIES),
    )


@dp.callback_query(F.data.startswith("STRATEGY:"))
async def handle_strategy_pick(callback: CallbackQuery) -> None:
    chat_id = callback.message.chat.id
    index = int(callback.data.split(":", 1)[1])
    if chat_id not in ACTIVE_CRAVINGS or not 0 <= index < len(COPING_STRATEGIES):
        await callback.answer("No craving timer running")
        return
    CHOSEN_STRATEGIES[chat_id] = COPING_STRATEGIES[index].title
    await callback.answer(f"Strategy: {COPING_STRATEGIES[index].title}")


@dp.message(CravingState.strategy)
async def handle_strategy_text(message: Message) -> None:
    text = _answer_text(message)
    if message.chat.id not in ACTIVE_CRAVINGS or not text:
        return
    CHOSEN_STRATEGIES[message.chat.id] = text
    await message.reply("Noted. Keep going 💪")


@dp.callback_query(F.data.in_({"CRAVING_RESISTED", "CRAVING_FAILED"}))
async def handle_craving_stop(callback: CallbackQuery) -> None:
    timer = ACTIVE_CRAVINGS.get(callback.message.chat.id)
    if timer is None:
        await callback.answer("No craving timer running")
        return
    await callback.answer()
    await timer.stop(successful=callback.data == "CRAVING_RESISTED")


# --- milestones / strategies ------------------------------------------------


@dp.callback_query(F.data == "MILESTONES")
async def handle_milestones_button(callback: CallbackQuery, tracker: TrackerState) -> None:
    await callback.answer()
    await callback.message.answer(_milestones_text(tracker))


@dp.message(Command("milestones"))
async def cmd_milestones(message: Message, tracker: TrackerState) -> None:
    await message.answer(_milestones_text(tracker))


def _milestones_text(tracker: TrackerState) -> str:
    now = _now(tracker)
    try:
        statuses = milestones_uc.execute(tracker, now)
    except ValidationError as exc:
        return f"⚠️ {exc.message}"
    hours = metrics.hours_since_quit(tracker.config_store.get().quit_date, now)
    return hub.build_milestones_text(statuses, hours)


@dp.message(Command("strategies"))
async def cmd_strategies(message: Message) -> None:
    await message.answer(hub.build_strategies_text(COPING_STRATEGIES))


@dp.message(Command("recent"))
async def cmd_recent(message: Message, tracker: TrackerState) -> None:
    now = _now(tracker)
    sessions = tracker.event_log.all(SmokingEvent)
    cravings = tracker.event_log.all(CravingEvent)
    await message.answer(
        hub.build_recent_sessions_text(sessions, now) + "\n\n" + hub.build_recent_cravings_text(cravings, now)
    )


# --- settings ---------------------------------------------------------------


@dp.message(Command("set"))
async def cmd_set(message: Message, command: CommandObject, bot: Bot, tracker: TrackerState) -> None:
    parts = (command.args or "").split()
    if len(parts) != 2 or parts[0] not in SETTABLE_FIELDS:
        await message.reply("Usage: /set cigs|price|pack <value>. Example: /set price 9.5")
        return

    field_name, parse = SETTABLE_FIELDS[parts[0]]
    try:
        value = parse(parts[1].replace(",", "."))
    except ValueError:
        await message.reply("Could not parse the number. Try again.")
        return

    await _apply_settings(message, bot, tracker, **{field_name: value})


@dp.message(Command("quitdate"))
async def cmd_quit_date(message: Message, command: CommandObject, bot: Bot, tracker: TrackerState) -> None:
    try:
        day = dt.date.fromisoformat((command.args or "").strip())
    except ValueError:
        await message.reply("Usage: /quitdate YYYY-MM-DD")
        return

    quit_date = dt.datetime.combine(day, dt.time(), tzinfo=tracker.tz)
    await _apply_settings(message, bot, tracker, quit_date=quit_date)


async def _apply_settings(message: Message, bot: Bot, tracker: TrackerState, **changes) -> None:
    try:
        update_config_uc.execute(tracker, now=_now(tracker), **changes)
        await message.reply("Settings saved ✅")
    except ValidationError as exc:
        await message.reply(f"Invalid {exc.field}: {exc.message}")
        return
    except PersistenceError:
        logger.exception("Failed to persist configuration")
        await message.reply(SAVE_FAILED_TEXT)
    await refresh_hub(bot, message.chat.id, tracker)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def build_tracker() -> TrackerState:
    init_db()
    return TrackerState.load(
        SqlAlchemySmokingEventRepository(),
        SqlAlchemyCravingRepository(),
        SqlAlchemyConfigurationRepository(),
        tz=settings.TIMEZONE,
    )


async def _runner(bot: Bot) -> None:
    """Async runner: start scheduler and polling concurrently."""
    # Scheduler must be started inside running loop
    scheduler.start()
    await dp.start_polling(bot)


def main() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")
    settings.validate_config()
    logger.info("Starting smoke tracker bot...")

    # workflow data: every handler receives the state container as `tracker`
    dp["tracker"] = build_tracker()
    bot = Bot(settings.BOT_TOKEN, default=DefaultBotProperties(parse_mode=ParseMode.HTML))

    asyncio.run(_runner(bot))


if __name__ == "__main__":
    main()
