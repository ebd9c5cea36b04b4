"""Reward emission economics: schedules, rates, APRs, supply and progress"""
from aurora_staking.economics.schedule import Schedule, ScheduleBoundary, to_token_units
from aurora_staking.economics.rewards import daily_rate, daily_rates
from aurora_staking.economics.apr import AprBreakdown, calculate_aprs
from aurora_staking.economics.supply import circulating_supply, staked_pct_of_supply, vote_power_pct
from aurora_staking.economics.progress import progress_pct, streams_progress

__all__ = [
    'Schedule',
    'ScheduleBoundary',
    'to_token_units',
    'daily_rate',
    'daily_rates',
    'AprBreakdown',
    'calculate_aprs',
    'circulating_supply',
    'staked_pct_of_supply',
    'vote_power_pct',
    'progress_pct',
    'streams_progress',
]
