"""
Streamlit web interface for the random-variable toolkit.

Interactive UI with tabs for:
- Distribution explorer with histogram and moments
- Binomial sampler diagnostics
"""

import streamlit as st
import numpy as np
import pandas as pd
import plotly.graph_objects as go
from scipy import stats

from rvkit.core import static_random
from rvkit.diagnostics.goodness_of_fit import check_binomial_fit, check_binomial_table
from rvkit.distributions.binomial import BinomialLongRV, build_binomial_table
from rvkit.distributions.exponential import ExpDistrRV, PoissonLongRV
from rvkit.distributions.gaussian import GaussianRV, LogNormalRV
from rvkit.distributions.uniform import UniformDoubleRV
from rvkit.utils.constants import BINOMIAL_TABLE_LIMIT

st.set_page_config(page_title="Random Variable Toolkit", layout="wide")

st.title("Random Variable Toolkit")
st.markdown("Bounded random variables and statistical checks")

# Sidebar parameters
st.sidebar.header("Sampling")
family = st.sidebar.selectbox(
    "Distribution", ["uniform", "gaussian", "lognormal", "exponential", "poisson", "binomial"]
)
count = st.sidebar.slider("Samples", 100, 100000, 10000, step=100)
seed = st.sidebar.number_input("Seed", value=42, min_value=0, step=1)

st.sidebar.header("Range")
use_min = st.sidebar.checkbox("Set minimum")
minimum = st.sidebar.number_input("Minimum", value=0.0, disabled=not use_min)
min_closed = st.sidebar.checkbox("Minimum closed", value=True, disabled=not use_min)
use_max = st.sidebar.checkbox("Set maximum")
maximum = st.sidebar.number_input("Maximum", value=10.0, disabled=not use_max)
max_closed = st.sidebar.checkbox("Maximum closed", value=True, disabled=not use_max)

# Main tabs
tab1, tab2 = st.tabs(["Distribution Explorer", "Binomial Diagnostics"])

with tab1:
    st.header(f"{family.capitalize()} Samples")

    col1, col2 = st.columns(2)
    with col1:
        if family == "uniform":
            lower = st.number_input("Lower", value=0.0)
            upper = st.number_input("Upper", value=1.0)
            factory = lambda: UniformDoubleRV(lower, upper)
        elif family == "gaussian":
            mean = st.number_input("Mean", value=0.0)
            sdev = st.number_input("Sdev", value=1.0, min_value=0.0)
            factory = lambda: GaussianRV(mean, sdev)
        elif family == "lognormal":
            mean = st.number_input("Mean", value=1.0, min_value=0.001)
            sdev = st.number_input("Sdev", value=0.5, min_value=0.0)
            factory = lambda: LogNormalRV(LogNormalRV.get_mu(mean, sdev), LogNormalRV.get_sigma(mean, sdev))
        elif family == "exponential":
            mean = st.number_input("Mean", value=1.0, min_value=0.0)
            factory = lambda: ExpDistrRV(mean)
        elif family == "poisson":
            mean = st.number_input("Mean", value=4.0, min_value=0.0)
            factory = lambda: PoissonLongRV(mean)
        else:
            prob = st.slider("Probability", 0.0, 1.0, 0.5)
            trials = st.number_input("Trials", value=10, min_value=1, step=1)
            factory = lambda: BinomialLongRV(prob, int(trials))

    try:
        static_random.set_seed(int(seed))
        rv = factory()
        if use_min:
            rv.set_minimum(minimum, min_closed)
        if use_max:
            rv.set_maximum(maximum, max_closed)
        values = rv.to_array(count)
    except ValueError as e:
        st.error(f"Error: {e}")
        st.stop()

    with col2:
        moments_df = pd.DataFrame({
            "Statistic": ["Mean", "Sdev", "Min", "Max"],
            "Value": [
                f"{values.mean():.6f}",
                f"{values.std(ddof=1):.6f}",
                f"{values.min():.6f}",
                f"{values.max():.6f}",
            ],
        })
        st.table(moments_df)
        if family == "binomial":
            st.info(f"Sampling mode: {rv.mode.value}")

    fig = go.Figure()
    fig.add_trace(go.Histogram(x=values, nbinsx=60, histnorm="probability density", name="Samples"))
    fig.update_layout(title="Sample Histogram", xaxis_title="Value", yaxis_title="Density")
    st.plotly_chart(fig, use_container_width=True)

with tab2:
    st.header("Binomial Sampler Diagnostics")

    prob = st.slider("Success probability", 0.0, 1.0, 0.3, key="diag_prob")
    trials = st.slider("Trials", 1, 200, 40, key="diag_trials")

    static_random.set_seed(int(seed))
    rv = BinomialLongRV(prob, trials)
    values = rv.to_array(count)
    fit = check_binomial_fit(values, prob, trials)

    st.metric(label="Sampling mode", value=rv.mode.value)
    if "p_value" in fit.details:
        st.metric(label="Chi-square p-value", value=f"{fit.details['p_value']:.4f}")
    if fit.is_valid:
        st.success("Samples are consistent with the exact distribution")
    else:
        for violation in fit.violations:
            st.error(violation)

    k = np.arange(trials + 1)
    observed = np.bincount(values, minlength=trials + 1) / count
    fig_pmf = go.Figure()
    fig_pmf.add_trace(go.Bar(x=k, y=observed, name="Observed"))
    fig_pmf.add_trace(go.Scatter(x=k, y=stats.binom.pmf(k, trials, prob), name="Exact", mode="markers"))
    fig_pmf.update_layout(title="Observed vs Exact PMF", xaxis_title="Successes", yaxis_title="Probability")
    st.plotly_chart(fig_pmf, use_container_width=True)

    if trials < BINOMIAL_TABLE_LIMIT:
        table = build_binomial_table(prob, trials)
        table_check = check_binomial_table(table)
        st.subheader("Cumulative Table")
        st.dataframe(pd.DataFrame({"Index": np.arange(len(table)), "Cumulative": table}))
        if not table_check.is_valid:
            for violation in table_check.violations:
                st.error(violation)
