PRESETS = {
    "default": {
        "yield_curve_spread": 0.5,
        "unemployment_rate": 4.0,
        "inflation_rate": 2.5,
        "gdp_per_capita_growth": 2.0,
        "point_cli": 100.2,
        "ism_new_orders": 52.0,
        "ism_supplier_deliveries": 51.0,
        "leading_index_change": 0.2,
    },
    "downturn": {
        "yield_curve_spread": -1.0,
        "unemployment_rate": 8.0,
        "inflation_rate": 2.0,
        "gdp_per_capita_growth": -3.0,
        "point_cli": 96.0,
        "ism_new_orders": 40.0,
        "ism_supplier_deliveries": 55.0,
        "leading_index_change": -1.5,
    },
    "expansion": {
        "yield_curve_spread": 2.0,
        "unemployment_rate": 3.5,
        "inflation_rate": 2.0,
        "gdp_per_capita_growth": 3.0,
        "point_cli": 103.0,
        "ism_new_orders": 58.0,
        "ism_supplier_deliveries": 50.0,
        "leading_index_change": 1.0,
    },
}

SAMPLE_REQUEST = {
    "indicators": PRESETS["downturn"],
    "trials": 20000,
    "seed": 7,
}

SAMPLE_CSV = (
    "yieldCurveSpread,unemploymentRate,inflationRate,gdpPerCapitaGrowth,"
    "pointCLI,ismNewOrders,ismSupplierDeliveries,leadingIndexChange\n"
    "-1.0,8.0,2.0,-3.0,96.0,40.0,55.0,-1.5\n"
)
