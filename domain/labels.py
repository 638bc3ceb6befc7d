"""Bilingual display labels for categories and units."""

from typing import Dict

from domain.enums import IngredientCategory, IngredientUnit, Language

CATEGORY_LABELS: Dict[IngredientCategory, Dict[Language, str]] = {
    IngredientCategory.VEGETABLES: {Language.EN: "Vegetables", Language.BG: "Зеленчуци"},
    IngredientCategory.FRUITS: {Language.EN: "Fruits", Language.BG: "Плодове"},
    IngredientCategory.MEAT: {Language.EN: "Meat", Language.BG: "Месо"},
    IngredientCategory.FISH: {Language.EN: "Fish & Seafood", Language.BG: "Риба и морски дарове"},
    IngredientCategory.DAIRY: {Language.EN: "Dairy & Eggs", Language.BG: "Млечни продукти и яйца"},
    IngredientCategory.GRAINS: {Language.EN: "Grains & Pasta", Language.BG: "Зърнени храни и паста"},
    IngredientCategory.LEGUMES: {Language.EN: "Legumes", Language.BG: "Бобови култури"},
    IngredientCategory.NUTS_SEEDS: {Language.EN: "Nuts & Seeds", Language.BG: "Ядки и семена"},
    IngredientCategory.HERBS_SPICES: {Language.EN: "Herbs & Spices", Language.BG: "Билки и подправки"},
    IngredientCategory.OILS_FATS: {Language.EN: "Oils & Fats", Language.BG: "Масла и мазнини"},
    IngredientCategory.CONDIMENTS: {Language.EN: "Condiments & Sauces", Language.BG: "Подправки и сосове"},
    IngredientCategory.BAKING: {Language.EN: "Baking Supplies", Language.BG: "Продукти за печене"},
    IngredientCategory.BEVERAGES: {Language.EN: "Beverages", Language.BG: "Напитки"},
    IngredientCategory.OTHER: {Language.EN: "Other", Language.BG: "Други"},
}

UNIT_LABELS: Dict[IngredientUnit, Dict[Language, str]] = {
    IngredientUnit.GRAM: {Language.EN: "gram (g)", Language.BG: "грам (g)"},
    IngredientUnit.KILOGRAM: {Language.EN: "kilogram (kg)", Language.BG: "килограм (kg)"},
    IngredientUnit.MILLIGRAM: {Language.EN: "milligram (mg)", Language.BG: "милиграм (mg)"},
    IngredientUnit.OUNCE: {Language.EN: "ounce (oz)", Language.BG: "унция (oz)"},
    IngredientUnit.POUND: {Language.EN: "pound (lb)", Language.BG: "фунт (lb)"},
    IngredientUnit.MILLILITER: {Language.EN: "milliliter (ml)", Language.BG: "милилитър (ml)"},
    IngredientUnit.LITER: {Language.EN: "liter (l)", Language.BG: "литър (l)"},
    IngredientUnit.TEASPOON: {Language.EN: "teaspoon (tsp)", Language.BG: "чаена лъжичка (ч.л.)"},
    IngredientUnit.TABLESPOON: {Language.EN: "tablespoon (tbsp)", Language.BG: "супена лъжица (с.л.)"},
    IngredientUnit.CUP: {Language.EN: "cup", Language.BG: "чаша"},
    IngredientUnit.FLUID_OUNCE: {Language.EN: "fluid ounce (fl oz)", Language.BG: "течна унция (fl oz)"},
    IngredientUnit.PINT: {Language.EN: "pint", Language.BG: "пинта"},
    IngredientUnit.QUART: {Language.EN: "quart", Language.BG: "кварта"},
    IngredientUnit.GALLON: {Language.EN: "gallon", Language.BG: "галон"},
    IngredientUnit.PIECE: {Language.EN: "piece", Language.BG: "брой"},
    IngredientUnit.SLICE: {Language.EN: "slice", Language.BG: "филия"},
    IngredientUnit.CLOVE: {Language.EN: "clove", Language.BG: "скилидка"},
    IngredientUnit.BUNCH: {Language.EN: "bunch", Language.BG: "връзка"},
    IngredientUnit.HANDFUL: {Language.EN: "handful", Language.BG: "шепа"},
    IngredientUnit.PINCH: {Language.EN: "pinch", Language.BG: "щипка"},
    IngredientUnit.DASH: {Language.EN: "dash", Language.BG: "малко"},
    IngredientUnit.CAN: {Language.EN: "can", Language.BG: "консерва"},
    IngredientUnit.JAR: {Language.EN: "jar", Language.BG: "буркан"},
    IngredientUnit.PACKAGE: {Language.EN: "package", Language.BG: "пакет"},
    IngredientUnit.BOX: {Language.EN: "box", Language.BG: "кутия"},
    IngredientUnit.BAG: {Language.EN: "bag", Language.BG: "торбичка"},
    IngredientUnit.TO_TASTE: {Language.EN: "to taste", Language.BG: "на вкус"},
    IngredientUnit.AS_NEEDED: {Language.EN: "as needed", Language.BG: "по необходимост"},
    IngredientUnit.WHOLE: {Language.EN: "whole", Language.BG: "цяло"},
    IngredientUnit.HALF: {Language.EN: "half", Language.BG: "половин"},
    IngredientUnit.QUARTER: {Language.EN: "quarter", Language.BG: "четвърт"},
}


def category_label(category: IngredientCategory, lang: Language = Language.BG) -> str:
    return CATEGORY_LABELS[IngredientCategory(category)][Language(lang)]


def unit_label(unit: IngredientUnit, lang: Language = Language.BG) -> str:
    return UNIT_LABELS[IngredientUnit(unit)][Language(lang)]
