import logging
from aiogram import Router, F
from aiogram.filters import Command
from aiogram.types import Message, CallbackQuery
from aiogram.fsm.context import FSMContext

from bot.ui.main_menu import get_main_menu_keyboard, MAIN_MENU_TEXT

router = Router()


@router.message(Command("start"))
async def start_handler(message: Message, state: FSMContext) -> None:
    """Handler for the /start command."""
    logging.info("Handling /start command")
    await state.clear()
    await message.answer(MAIN_MENU_TEXT, reply_markup=get_main_menu_keyboard())


@router.callback_query(F.data == "main_menu")
async def main_menu_callback_handler(callback: CallbackQuery, state: FSMContext):
    """Handler for the 'Back to Main Menu' button.

    Only transient flow state is dropped; applied filters and sort survive.
    """
    logging.info("Handling 'main_menu' callback")
    await state.set_state(None)
    await callback.message.edit_text(
        MAIN_MENU_TEXT,
        reply_markup=get_main_menu_keyboard()
    )
    await callback.answer()
