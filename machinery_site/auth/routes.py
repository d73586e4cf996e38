# machinery_site/auth/routes.py
import logging
from datetime import datetime, timezone
from flask import render_template, flash, redirect, url_for, request, current_app
from flask_login import current_user, login_user, logout_user
from machinery_site import db
from machinery_site.activity import log_activity
from machinery_site.models import User
from machinery_site.permissions import has_permission
from machinery_site.auth import bp
from machinery_site.auth.forms import LoginForm

logger = logging.getLogger(__name__)


def _default_landing(user):
    if has_permission(user.role, 'dashboard.view'):
        return url_for('admin.dashboard')
    return url_for('core.home', lang=current_app.config['DEFAULT_LANGUAGE'])


@bp.route('/login', methods=['GET', 'POST'])
def login():
    if current_user.is_authenticated:
        return redirect(_default_landing(current_user))

    form = LoginForm()
    if form.validate_on_submit():
        user = db.session.scalar(db.select(User).filter_by(username=form.username.data))
        if user is None or not user.check_password(form.password.data):
            logger.warning(f"Failed login attempt for username '{form.username.data}'")
            if user is not None:
                log_activity('failed_login', 'Incorrect password', user=user)
            flash('Invalid username or password', 'danger')
            return redirect(url_for('auth.login'))
        if not user.is_active_account:
            logger.warning(f"Login attempt for deactivated account '{user.username}'")
            flash('This account has been deactivated.', 'danger')
            return redirect(url_for('auth.login'))

        login_user(user, remember=form.remember_me.data)
        user.last_login = datetime.now(timezone.utc)
        db.session.commit()
        logger.info(f"User '{user.username}' logged in")
        log_activity('login', user=user)
        flash(f'Welcome back, {user.username}!', 'success')

        # Only follow relative paths to avoid open redirects
        next_page = request.args.get('next')
        if next_page and (not next_page.startswith('/') or next_page.startswith('//')):
            flash('Invalid redirect specified.', 'warning')
            next_page = None

        return redirect(next_page or _default_landing(user))

    return render_template('auth/login.html', title='Sign In', form=form)


@bp.route('/logout')
def logout():
    if current_user.is_authenticated:
        logger.info(f"User '{current_user.username}' logged out")
        log_activity('logout')
    logout_user()
    flash('You have been logged out.', 'info')
    return redirect(url_for('core.index'))
