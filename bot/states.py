from aiogram.fsm.state import State, StatesGroup


class LeadFilters(StatesGroup):
    enter_search = State()


class Generate(StatesGroup):
    choose_niches = State()
    enter_location = State()
