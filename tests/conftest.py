"""
Test fixtures shared across all GasGuard tests.
"""

import pytest


@pytest.fixture
def unused_var_contract():
    """One contract struct, three fields, `unusedVar` never referenced."""
    return '''#![no_std]
use soroban_sdk::{contract, contractimpl, contracttype, Env};

#[contracttype]
pub struct TokenContract {
    pub usedVar: u64,
    pub unusedVar: u64,
    pub anotherUsed: u64,
}

#[contractimpl]
impl TokenContract {
    pub fn bump(&mut self) {
        self.usedVar += 1;
    }

    pub fn total(&self) -> u64 {
        self.usedVar + self.anotherUsed
    }
}
'''


@pytest.fixture
def all_used_contract():
    """Every field is referenced by the impl block."""
    return '''use soroban_sdk::{contract, contractimpl, contracttype, Address, Env};

#[contracttype]
#[derive(Clone)]
pub struct Counter {
    pub counter: u32,
    pub owner: Address,
}

#[contractimpl]
impl Counter {
    pub fn increment(&mut self) -> u32 {
        self.counter += 1;
        self.counter
    }

    pub fn owner(&self) -> Address {
        self.owner.clone()
    }
}
'''


@pytest.fixture
def five_field_contract():
    """Five fields, two referenced, three dead."""
    return '''use soroban_sdk::{contract, contractimpl, contracttype, Env};

#[contracttype]
pub struct Ledger {
    pub balance: i128,
    pub supply: i128,
    pub fee_rate: u32,
    pub metadata_uri: u64,
    pub paused_flag: bool,
}

#[contractimpl]
impl Ledger {
    pub fn deposit(&mut self, amount: i128) {
        let Ledger { balance, .. } = self;
        *balance += amount;
        self.supply = self.supply + amount;
    }
}
'''


@pytest.fixture
def catalogue_contract():
    """Soroban contract that trips most of the heuristic catalogue."""
    return '''#![no_std]
use soroban_sdk::{contract, contractimpl, contracttype, Address, Env, String};

#[contract]
pub struct Vault;

#[contracttype]
#[derive(Clone)]
pub struct VaultState {
    pub total_supply: u128,
    pub label: String,
    reserve: u64,
}

#[contractimpl]
impl Vault {
    pub fn set_admin(env: Env, new_admin: Address) {
        let tag = "admin".to_string();
        let key = new_admin.clone();
        env.storage().instance().set(&tag, &key);
    }

    pub fn mint(env: Env, amount: u64) -> u64 {
        let mut i = 0;
        while i < amount {
            i += 1;
        }
        i
    }

    pub fn stats(env: Env) -> u64 {
        let a: u64 = env.storage().instance().get(&1).unwrap();
        let b: u64 = env.storage().instance().get(&2).unwrap();
        let c: u64 = env.storage().instance().get(&3).unwrap();
        let d: u64 = env.storage().instance().get(&4).unwrap();
        a + b + c + d
    }

    fn helper(env: Env) -> u64 {
        0
    }
}
'''


@pytest.fixture
def clean_soroban_contract():
    """Contract with no heuristic findings at all."""
    return '''use soroban_sdk::{contract, contractimpl, contracttype, Address, Env};

#[contract]
pub struct Registry;

#[contracttype]
pub struct RegistryState {
    pub admin: Address,
    pub entries: u32,
}

#[contractimpl]
impl Registry {
    pub fn new(env: Env, admin: Address) -> RegistryState {
        RegistryState { admin, entries: 0 }
    }

    pub fn count(state: RegistryState) -> u32 {
        state.entries
    }
}
'''


@pytest.fixture
def vyper_contract():
    """Vyper contract with one naming violation and one internal-usage violation."""
    return '''# @version ^0.3.0

owner: public(address)
total: uint256
FEE: constant(uint256) = 3

struct Position:
    holder: address
    size: uint256

event Transfer:
    sender: indexed(address)
    amount: uint256

@external
def __init__():
    self.owner = msg.sender

@external
def _internal_helper() -> uint256:
    return 42

@external
def calculate_fee(amount: uint256) -> uint256:
    return amount * FEE / 1000

@external
@view
def process_payment(amount: uint256,
                    memo: String[32]) -> uint256:
    fee: uint256 = self.calculate_fee(amount)
    return amount - fee
'''
